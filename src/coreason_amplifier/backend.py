# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_amplifier

from abc import ABC, abstractmethod

from coreason_amplifier.models import JudgeReport, SourceFile


class ReviewBackend(ABC):
    """
    Abstract base class for language-model review backends.
    Follows the Strategy Pattern.
    """

    @abstractmethod
    async def review(self, source: SourceFile) -> str:
        """Request a review of one file.

        Sends the file's full content to the model in a single request.

        Args:
            source: The file to review.

        Returns:
            str: The raw model response text.

        Raises:
            httpx.HTTPError: If the request could not be sent.
            RuntimeError: If the backend answered with a non-success status.
            ValueError: If the response body could not be decoded.
        """
        pass  # pragma: no cover


class JudgeClient(ABC):
    """
    Abstract base class for asynchronous code execution services.
    """

    @abstractmethod
    async def submit(self, source_code: str, language_id: int) -> str:
        """Submit code for execution.

        Args:
            source_code: The code to run.
            language_id: The judge language id.

        Returns:
            str: The opaque submission token.

        Raises:
            httpx.HTTPError: If the request could not be sent.
            RuntimeError: If the judge rejected the submission.
        """
        pass  # pragma: no cover

    @abstractmethod
    async def fetch(self, token: str) -> JudgeReport:
        """Fetch the current state of a submission.

        Args:
            token: The submission token returned by ``submit``.

        Returns:
            JudgeReport: Status and captured output.

        Raises:
            httpx.HTTPError: If the request could not be sent.
            RuntimeError: If the judge answered with a non-success status.
        """
        pass  # pragma: no cover
