# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_amplifier

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from coreason_amplifier.models.source import SourceFile


class Section(str, Enum):
    """Narrative categories a review is bucketed into."""

    ANALYSIS = "analysis"
    SUGGESTIONS = "suggestions"
    SECURITY = "security"
    PERFORMANCE = "performance"


class FileStatus(str, Enum):
    PENDING = "pending"
    ANALYZING = "analyzing"
    DONE = "done"
    FAILED = "failed"


class ParsedResponse(BaseModel):
    """Structured fragment extracted from one raw model response.

    Attributes:
        score: Review score, clamped to [0, 100].
        corrected_code: Interior of the first fenced code block, if any.
        has_corrections: Whether a corrected code block was found.
        narrative: The response text with score tags, thinking blocks and the
            first fenced block removed.
        sections: Narrative lines grouped by section; empty sections are omitted.
    """

    model_config = ConfigDict(frozen=True)

    score: int = Field(default=0, ge=0, le=100)
    corrected_code: str | None = None
    has_corrections: bool = False
    narrative: str = ""
    sections: dict[Section, list[str]] = Field(default_factory=dict)


class AnalysisOutcome(BaseModel):
    """The result of reviewing one file, either parsed or a synthetic failure.

    Attributes:
        file_name: Name of the reviewed file.
        path: Path of the reviewed file within the batch.
        original_code: The content that was sent for review.
        raw_narrative: Cleaned narrative shown to the user, or ``Error: ...`` on failure.
        score: Review score in [0, 100]; always 0 for failures.
        corrected_code: Suggested replacement code, if the model produced one.
        has_corrections: Whether ``corrected_code`` is set.
        sections: Narrative lines grouped by section.
        error: Failure description for synthetic outcomes, ``None`` otherwise.
    """

    model_config = ConfigDict(frozen=True)

    file_name: str
    path: str
    original_code: str
    raw_narrative: str
    score: int = Field(default=0, ge=0, le=100)
    corrected_code: str | None = None
    has_corrections: bool = False
    sections: dict[Section, list[str]] = Field(default_factory=dict)
    error: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def grade(self) -> Literal["excellent", "fair", "poor"]:
        """Score band used when presenting results."""
        if self.score >= 90:
            return "excellent"
        if self.score >= 70:
            return "fair"
        return "poor"

    @classmethod
    def from_parsed(cls, source: SourceFile, parsed: ParsedResponse) -> "AnalysisOutcome":
        return cls(
            file_name=source.name,
            path=source.path,
            original_code=source.content,
            raw_narrative=parsed.narrative,
            score=parsed.score,
            corrected_code=parsed.corrected_code,
            has_corrections=parsed.has_corrections,
            sections=parsed.sections,
        )

    @classmethod
    def failure(cls, source: SourceFile, description: str) -> "AnalysisOutcome":
        return cls(
            file_name=source.name,
            path=source.path,
            original_code=source.content,
            raw_narrative=f"Error: {description}",
            score=0,
            has_corrections=False,
            error=description,
        )


class BatchProgress(BaseModel):
    """Progress of the batch currently being analyzed.

    ``current_file`` and ``current_step`` form an advisory, last-write-wins
    cursor: under concurrent dispatch they show whichever file updated them
    last. ``statuses`` tracks every file individually and is accurate.
    """

    is_analyzing: bool = False
    current_file: str = ""
    current_step: str = ""
    statuses: dict[str, FileStatus] = Field(default_factory=dict)

    def start(self, paths: list[str]) -> None:
        self.is_analyzing = True
        self.current_file = ""
        self.current_step = "Initializing..."
        self.statuses = {path: FileStatus.PENDING for path in paths}

    def mark(self, path: str, status: FileStatus, step: str | None = None) -> None:
        self.statuses[path] = status
        if step is not None:
            self.current_file = path
            self.current_step = step

    def finish(self) -> None:
        self.is_analyzing = False
        self.current_file = ""
        self.current_step = ""

    @property
    def pending(self) -> list[str]:
        return [p for p, s in self.statuses.items() if s in (FileStatus.PENDING, FileStatus.ANALYZING)]
