# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_amplifier

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import aiofiles  # type: ignore[import-untyped]
from loguru import logger

from coreason_amplifier.models import AnalysisOutcome, BatchProgress, SourceFile


@dataclass
class ReviewSession:
    """State of one review session: the selected files, their outcomes and the execution output."""

    files: list[SourceFile] = field(default_factory=list)
    results: list[AnalysisOutcome] = field(default_factory=list)
    progress: BatchProgress = field(default_factory=BatchProgress)
    execution_output: str = ""

    def select(self, files: Iterable[SourceFile]) -> None:
        """Replace the file set. Previous results are discarded."""
        self.files = list(files)
        self.results = []

    async def load_paths(self, paths: Iterable[str | Path], root: Path | None = None) -> list[SourceFile]:
        """Read files from disk as UTF-8 text and select them.

        Args:
            paths: Files to read.
            root: When given, file paths are recorded relative to it.

        Returns:
            list[SourceFile]: The selected files.

        Raises:
            FileNotFoundError: If a path does not exist.
            UnicodeDecodeError: If a file is not valid UTF-8 text.
        """
        loaded: list[SourceFile] = []
        for raw_path in paths:
            file_path = Path(raw_path)
            if not file_path.is_file():
                raise FileNotFoundError(f"Source file not found: {file_path}")

            async with aiofiles.open(file_path, "r", encoding="utf-8") as f:
                content = await f.read()

            display_path = file_path.relative_to(root).as_posix() if root else file_path.as_posix()
            loaded.append(SourceFile(name=file_path.name, path=display_path, content=content))

        logger.info(f"Loaded {len(loaded)} files for review")
        self.select(loaded)
        return loaded

    def record(self, outcome: AnalysisOutcome) -> None:
        self.results.append(outcome)

    def set_execution_output(self, text: str) -> None:
        self.execution_output = text

    def outcome_for(self, path: str) -> AnalysisOutcome | None:
        return next((r for r in self.results if r.path == path), None)

    def sorted_results(self) -> list[AnalysisOutcome]:
        """Outcomes in file selection order."""
        order = {f.path: i for i, f in enumerate(self.files)}
        return sorted(self.results, key=lambda r: (order.get(r.path, len(order)), r.path))
