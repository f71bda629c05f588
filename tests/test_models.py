import pytest
from pydantic import ValidationError

from coreason_amplifier.models import (
    AnalysisOutcome,
    BatchProgress,
    ExecutionJob,
    FileStatus,
    JobStatus,
    JudgeReport,
    ParsedResponse,
    Section,
    SourceFile,
)


def test_source_file_derives_extension() -> None:
    assert SourceFile(name="main.test.py", path="main.test.py", content="").extension == "py"
    assert SourceFile(name="Makefile", path="Makefile", content="").extension == "Makefile"
    assert SourceFile(name="notes.", path="notes.", content="").extension == ""
    assert SourceFile(name="a.rs", path="a.rs", content="", extension="rust").extension == "rust"


def test_source_file_is_immutable() -> None:
    source = SourceFile(name="a.py", path="a.py", content="x")
    with pytest.raises(ValidationError):
        source.content = "y"  # type: ignore[misc]


def test_outcome_from_parsed() -> None:
    source = SourceFile(name="a.py", path="pkg/a.py", content="x = 1")
    parsed = ParsedResponse(
        score=91,
        corrected_code="x = 2",
        has_corrections=True,
        narrative="Use 2.",
        sections={Section.ANALYSIS: ["Use 2."]},
    )
    outcome = AnalysisOutcome.from_parsed(source, parsed)

    assert outcome.file_name == "a.py"
    assert outcome.path == "pkg/a.py"
    assert outcome.original_code == "x = 1"
    assert outcome.raw_narrative == "Use 2."
    assert outcome.score == 91
    assert outcome.has_corrections
    assert not outcome.is_error
    assert outcome.grade == "excellent"


def test_outcome_failure() -> None:
    source = SourceFile(name="a.py", path="a.py", content="x")
    outcome = AnalysisOutcome.failure(source, "Server error: 502")

    assert outcome.score == 0
    assert outcome.raw_narrative == "Error: Server error: 502"
    assert outcome.is_error
    assert outcome.grade == "poor"


@pytest.mark.parametrize("score, grade", [(100, "excellent"), (90, "excellent"), (89, "fair"), (70, "fair"), (69, "poor")])
def test_grade_bands(score: int, grade: str) -> None:
    outcome = AnalysisOutcome(file_name="a", path="a", original_code="", raw_narrative="", score=score)
    assert outcome.grade == grade


def test_outcome_rejects_out_of_range_score() -> None:
    with pytest.raises(ValidationError):
        AnalysisOutcome(file_name="a", path="a", original_code="", raw_narrative="", score=101)


def test_batch_progress_lifecycle() -> None:
    progress = BatchProgress()
    progress.start(["a", "b"])
    assert progress.is_analyzing
    assert progress.current_step == "Initializing..."
    assert progress.pending == ["a", "b"]

    progress.mark("a", FileStatus.ANALYZING, "Analyzing code...")
    progress.mark("b", FileStatus.ANALYZING, "Analyzing code...")
    progress.mark("a", FileStatus.DONE)
    assert progress.current_file == "b"
    assert progress.pending == ["b"]

    progress.mark("b", FileStatus.FAILED)
    progress.finish()
    assert not progress.is_analyzing
    assert progress.current_file == ""
    assert progress.statuses == {"a": FileStatus.DONE, "b": FileStatus.FAILED}


def test_job_apply_non_terminal() -> None:
    job = ExecutionJob(source_code="x", language_id=71)
    job.apply(JudgeReport.model_validate({"status": {"id": 1}}))
    assert job.status == JobStatus.QUEUED
    job.apply(JudgeReport.model_validate({"status": {"id": 2}}))
    assert job.status == JobStatus.RUNNING
    assert job.polls == 2
    assert not job.status.is_terminal


def test_job_apply_terminal_failure_uses_description() -> None:
    job = ExecutionJob(source_code="x", language_id=71)
    job.apply(JudgeReport.model_validate({"status": {"id": 5, "description": "Time Limit Exceeded"}}))
    assert job.status == JobStatus.FAILED
    assert job.status.is_terminal
    assert job.display_output() == "Error: Time Limit Exceeded"


def test_job_display_prefers_stdout() -> None:
    job = ExecutionJob(source_code="x", language_id=71, stdout="out", stderr="err")
    assert job.display_output() == "out"
