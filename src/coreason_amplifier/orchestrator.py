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
from typing import Callable, Literal, Sequence

from loguru import logger

from coreason_amplifier.backend import ReviewBackend
from coreason_amplifier.models import AnalysisOutcome, BatchProgress, FileStatus, SourceFile
from coreason_amplifier.parser import RegexResponseParser, ResponseParser

ANALYZING_STEP = "Analyzing code..."


def resolve_duplicate_paths(
    files: Sequence[SourceFile], policy: Literal["disambiguate", "reject"] = "disambiguate"
) -> list[SourceFile]:
    """Make file paths unique within a batch.

    With ``disambiguate`` repeated paths get a ``(2)``, ``(3)``... suffix in
    input order. With ``reject`` any repeat raises.

    Raises:
        ValueError: If a path repeats and the policy is ``reject``.
    """
    seen: dict[str, int] = {}
    taken = {f.path for f in files}
    resolved: list[SourceFile] = []

    for source in files:
        count = seen.get(source.path, 0) + 1
        seen[source.path] = count
        if count == 1:
            resolved.append(source)
            continue

        if policy == "reject":
            raise ValueError(f"Duplicate file path in batch: {source.path}")

        candidate = f"{source.path} ({count})"
        while candidate in taken:
            count += 1
            candidate = f"{source.path} ({count})"
        seen[source.path] = count
        taken.add(candidate)
        logger.warning(f"Duplicate path {source.path} renamed to {candidate}")
        resolved.append(source.model_copy(update={"path": candidate}))

    return resolved


class AnalysisOrchestrator:
    """Fans a batch of files out to the review backend and gathers one outcome per file.

    Requests run concurrently, bounded by ``max_concurrency``. A failing
    request becomes a score-0 outcome for its file and never affects the
    others. Each batch collects its own outcomes in the order they settle.
    """

    def __init__(
        self,
        backend: ReviewBackend,
        parser: ResponseParser | None = None,
        max_concurrency: int = 4,
        duplicate_paths: Literal["disambiguate", "reject"] = "disambiguate",
        progress: BatchProgress | None = None,
        on_outcome: Callable[[AnalysisOutcome], None] | None = None,
    ):
        """Initializes the AnalysisOrchestrator.

        Args:
            backend: The review backend used for every file.
            parser: Response parser. Defaults to the regex parser.
            max_concurrency: Maximum number of in-flight review requests.
            duplicate_paths: How repeated paths in one batch are handled.
            progress: Shared progress tracker. A new one is created if omitted.
            on_outcome: Called with each outcome as soon as it settles.
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.backend = backend
        self.parser = parser or RegexResponseParser()
        self.max_concurrency = max_concurrency
        self.duplicate_paths = duplicate_paths
        self.progress = progress or BatchProgress()
        self.on_outcome = on_outcome

    def _settle(self, outcome: AnalysisOutcome, results: list[AnalysisOutcome] | None) -> AnalysisOutcome:
        if results is not None:
            results.append(outcome)
        if self.on_outcome:
            self.on_outcome(outcome)
        return outcome

    async def analyze_file(
        self,
        source: SourceFile,
        semaphore: asyncio.Semaphore,
        results: list[AnalysisOutcome] | None = None,
    ) -> AnalysisOutcome:
        """Review one file. Never raises; failures become error outcomes."""
        async with semaphore:
            self.progress.mark(source.path, FileStatus.ANALYZING, ANALYZING_STEP)
            try:
                raw = await self.backend.review(source)
            except Exception as e:
                logger.error(f"Error validating {source.path}: {e}")
                self.progress.mark(source.path, FileStatus.FAILED)
                return self._settle(AnalysisOutcome.failure(source, str(e) or type(e).__name__), results)

        outcome = AnalysisOutcome.from_parsed(source, self.parser.parse(raw))
        self.progress.mark(source.path, FileStatus.DONE)
        logger.info(f"Reviewed {source.path}: score {outcome.score}")
        return self._settle(outcome, results)

    async def analyze_batch(self, files: Sequence[SourceFile]) -> list[AnalysisOutcome]:
        """Review every file in the batch and return one outcome per file.

        The returned list is in settlement order; sort by ``path`` when a
        stable order is needed.

        Raises:
            ValueError: If the batch repeats a path and duplicates are rejected.
        """
        if not files:
            return []

        batch = resolve_duplicate_paths(files, self.duplicate_paths)

        results: list[AnalysisOutcome] = []
        self.progress.start([f.path for f in batch])
        semaphore = asyncio.Semaphore(self.max_concurrency)
        logger.info(f"Analyzing batch of {len(batch)} files (max {self.max_concurrency} in flight)")

        try:
            await asyncio.gather(*(self.analyze_file(source, semaphore, results) for source in batch))
        finally:
            self.progress.finish()

        failed = sum(1 for outcome in results if outcome.is_error)
        logger.info(f"Batch finished: {len(results) - failed} reviewed, {failed} failed")
        return results
