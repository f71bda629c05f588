# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_amplifier

import hashlib

from loguru import logger


class VeritasIntegrator:
    """Audit trail for code sent to the remote judge.

    Logs a hash of every submission through the application logger.
    """

    def __init__(self, service_name: str = "coreason-amplifier", enabled: bool = True):
        """Initializes the VeritasIntegrator.

        Args:
            service_name: The name of the service recorded in audit lines.
            enabled: Whether to enable audit logging.
        """
        self.service_name = service_name
        self.enabled = enabled
        if self.enabled:
            logger.info("Veritas Audit Logging enabled (Local Mode - log sink only)")

    async def log_pre_execution(self, code: str, language_id: int) -> str:
        """Log a code submission before it reaches the judge.

        Args:
            code: The code to be executed.
            language_id: The Judge0 language id of the code.

        Returns:
            str: The SHA-256 hash of the code.
        """
        code_hash = hashlib.sha256(code.encode("utf-8")).hexdigest()
        if self.enabled:
            logger.info(
                f"AUDIT: [{self.service_name}] Submitting language {language_id} code. "
                f"Hash: {code_hash}, Length: {len(code)}"
            )
        return code_hash
