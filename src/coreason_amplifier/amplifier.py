# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_amplifier

import asyncio
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterable, TypeVar
from uuid import uuid4

import httpx
from anyio.from_thread import BlockingPortal, start_blocking_portal
from loguru import logger

from coreason_amplifier.config import AmplifierConfig
from coreason_amplifier.factory import AmplifierFactory
from coreason_amplifier.languages import language_id_for
from coreason_amplifier.models import AnalysisOutcome, SourceFile
from coreason_amplifier.orchestrator import AnalysisOrchestrator, resolve_duplicate_paths
from coreason_amplifier.poller import ExecutionPoller
from coreason_amplifier.session import ReviewSession

T = TypeVar("T")


class AmplifierAsync:
    """Async-native review service (The Core).

    Owns the HTTP client, the review session and the pipeline components.
    """

    def __init__(
        self,
        config: AmplifierConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initializes the AmplifierAsync service.

        Args:
            config: Configuration for backends, judge and batching.
            client: Optional httpx.AsyncClient for connection pooling.
        """
        self.config = config or AmplifierConfig()
        self._internal_client = client is None
        self._client = client or httpx.AsyncClient()
        self.session = ReviewSession()
        self.session_id = str(uuid4())
        self._lock = asyncio.Lock()

        self.orchestrator = AnalysisOrchestrator(
            backend=AmplifierFactory.get_backend(self.config, self._client),
            max_concurrency=self.config.max_concurrency,
            duplicate_paths=self.config.duplicate_paths,
            progress=self.session.progress,
            on_outcome=self.session.record,
        )
        self.poller: ExecutionPoller = AmplifierFactory.get_poller(
            self.config, AmplifierFactory.get_judge(self.config, self._client)
        )
        self.poller.on_output = self.session.set_execution_output

    async def __aenter__(self) -> "AmplifierAsync":
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Closes the HTTP client if this service created it."""
        if self._internal_client:
            await self._client.aclose()

    async def load(self, paths: Iterable[str | Path], root: Path | None = None) -> list[SourceFile]:
        """Reads files from disk into the session.

        Args:
            paths: Files to read.
            root: Optional directory that recorded paths are made relative to.

        Returns:
            list[SourceFile]: The selected files.
        """
        async with self._lock:
            return await self.session.load_paths(paths, root)

    async def validate(self, files: Iterable[SourceFile] | None = None) -> list[AnalysisOutcome]:
        """Reviews the session's files, or ``files`` when given.

        Batches on one service run one at a time; the session holds the
        files and results of the latest batch.

        Args:
            files: Optional replacement file set.

        Returns:
            list[AnalysisOutcome]: One outcome per file of this batch, in selection order.
        """
        async with self._lock:
            if files is not None:
                self.session.select(files)
            batch = resolve_duplicate_paths(self.session.files, self.config.duplicate_paths)
            self.session.select(batch)

            logger.info(f"Validating {len(batch)} files", session_id=self.session_id)
            outcomes = await self.orchestrator.analyze_batch(batch)

        order = {f.path: i for i, f in enumerate(batch)}
        return sorted(outcomes, key=lambda o: order[o.path])

    async def run_code(self, code: str, language_id: int | None = None) -> str:
        """Executes code on the judge.

        Args:
            code: The source code to run.
            language_id: Judge0 language id (default from configuration).

        Returns:
            str: stdout, or stderr prefixed with ``Error:``.
        """
        return await self.poller.run_execution(code, language_id or self.config.default_language_id)

    async def run_correction(self, path: str) -> str:
        """Executes the corrected code suggested for a reviewed file.

        Args:
            path: Path of a reviewed file in the session.

        Returns:
            str: The execution output.

        Raises:
            KeyError: If the file has no outcome.
            ValueError: If the outcome carries no corrected code.
        """
        outcome = self.session.outcome_for(path)
        if outcome is None:
            raise KeyError(f"No review outcome for {path}")
        if not outcome.corrected_code:
            raise ValueError(f"Review of {path} has no corrected code")

        extension = next((f.extension for f in self.session.files if f.path == path), "")
        language_id = language_id_for(extension, self.config.default_language_id)
        return await self.run_code(outcome.corrected_code, language_id)


class Amplifier:
    """Sync Facade for AmplifierAsync (The Facade).

    Wraps AmplifierAsync and executes methods on one event loop running in a
    blocking portal thread. The loop lives until ``close`` (or the end of the
    ``with`` block), so pooled HTTP connections stay usable across calls.
    """

    def __init__(
        self,
        config: AmplifierConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._async = AmplifierAsync(config, client)
        self._portal_cm: AbstractContextManager[BlockingPortal] | None = None
        self._portal: BlockingPortal | None = None

    @property
    def session(self) -> ReviewSession:
        return self._async.session

    def _call(self, func: Callable[..., Awaitable[T]], *args: Any) -> T:
        if self._portal is None:
            self._portal_cm = start_blocking_portal()
            self._portal = self._portal_cm.__enter__()
        return self._portal.call(func, *args)

    def close(self) -> None:
        """Closes the service and stops its event loop."""
        if self._portal is None or self._portal_cm is None:
            return
        try:
            self._portal.call(self._async.__aexit__, None, None, None)
        finally:
            self._portal_cm.__exit__(None, None, None)
            self._portal = None
            self._portal_cm = None

    def __enter__(self) -> "Amplifier":
        self._call(self._async.__aenter__)
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    def load(self, paths: Iterable[str | Path], root: Path | None = None) -> list[SourceFile]:
        return self._call(self._async.load, paths, root)

    def validate(self, files: Iterable[SourceFile] | None = None) -> list[AnalysisOutcome]:
        return self._call(self._async.validate, files)

    def run_code(self, code: str, language_id: int | None = None) -> str:
        return self._call(self._async.run_code, code, language_id)

    def run_correction(self, path: str) -> str:
        return self._call(self._async.run_correction, path)
