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

from pydantic import BaseModel, Field

# Judge0 status ids: 1 In Queue, 2 Processing, 3 Accepted, 4+ terminal failures.
JUDGE_QUEUED = 1
JUDGE_PROCESSING = 2
JUDGE_ACCEPTED = 3


class JobStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED)


class JudgeStatus(BaseModel):
    id: int
    description: str = ""


class JudgeReport(BaseModel):
    """Body returned by the judge for a submission poll."""

    status: JudgeStatus
    stdout: str | None = None
    stderr: str | None = None
    compile_output: str | None = None
    message: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status.id > JUDGE_PROCESSING


class ExecutionJob(BaseModel):
    """A single code execution tracked through the judge's submit/poll lifecycle.

    Attributes:
        source_code: The code submitted for execution.
        language_id: The Judge0 language id.
        submission_token: Opaque token returned on submit.
        status: Lifecycle state; ``succeeded`` and ``failed`` are terminal.
        stdout: Standard output reported at the terminal state.
        stderr: Standard error reported at the terminal state.
        compile_output: Compiler output for compiled languages.
        message: Judge status description or local failure reason.
        polls: Number of status polls performed so far.
    """

    source_code: str
    language_id: int
    submission_token: str | None = None
    status: JobStatus = JobStatus.QUEUED
    stdout: str | None = None
    stderr: str | None = None
    compile_output: str | None = None
    message: str | None = None
    polls: int = Field(default=0, ge=0)

    def apply(self, report: JudgeReport) -> None:
        """Fold a poll report into the job state."""
        self.polls += 1
        if not report.is_terminal:
            self.status = JobStatus.RUNNING if report.status.id == JUDGE_PROCESSING else JobStatus.QUEUED
            return

        self.status = JobStatus.SUCCEEDED if report.status.id == JUDGE_ACCEPTED else JobStatus.FAILED
        self.stdout = report.stdout
        self.stderr = report.stderr
        self.compile_output = report.compile_output
        self.message = report.message or report.status.description or None

    def display_output(self) -> str:
        """Text surfaced to the user once the job is terminal."""
        if self.stdout:
            return self.stdout
        return "Error: " + (self.stderr or self.compile_output or self.message or "")
