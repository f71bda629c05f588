# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_amplifier

import os

from loguru import logger


class VaultIntegrator:
    """
    Standalone secret lookup backed by environment variables.
    """

    def __init__(self, prefix: str = "COREASON_AMPLIFIER_"):
        self.prefix = prefix

    def get_secret(self, key: str) -> str | None:
        """
        Fetch a secret by key.

        Looks up the bare key first (e.g. ``JUDGE0_API_KEY``), then the
        prefixed variant (``COREASON_AMPLIFIER_JUDGE0_API_KEY``).
        """
        val = os.getenv(key)
        if not val:
            val = os.getenv(f"{self.prefix}{key}")

        if not val:
            logger.debug(f"Secret {key} not found in environment.")

        return val or None
