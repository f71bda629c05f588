from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from coreason_amplifier.backend import JudgeClient
from coreason_amplifier.models import ExecutionJob, JobStatus, JudgeReport
from coreason_amplifier.poller import FAILED_TEXT, RUNNING_TEXT, ExecutionPoller


def report(status_id: int, stdout: str | None = None, stderr: str | None = None, **kwargs: Any) -> JudgeReport:
    return JudgeReport.model_validate({"status": {"id": status_id}, "stdout": stdout, "stderr": stderr, **kwargs})


@pytest.fixture
def judge() -> Any:
    mock = AsyncMock(spec=JudgeClient)
    mock.submit = AsyncMock(return_value="tok-123")
    mock.fetch = AsyncMock()
    return mock


@pytest.mark.asyncio
async def test_polls_until_terminal(judge: Any, no_sleep: AsyncMock) -> None:
    judge.fetch.side_effect = [report(1), report(1), report(3, stdout="OK")]
    poller = ExecutionPoller(judge, initial_delay=1.0, interval=1.0)

    output = await poller.run_execution("print('OK')", 71)

    assert output == "OK"
    assert judge.fetch.await_count == 3
    judge.fetch.assert_awaited_with("tok-123")
    judge.submit.assert_awaited_once_with("print('OK')", 71)
    # initial delay plus one wait after each of the two non-terminal polls
    assert [c.args[0] for c in no_sleep.await_args_list] == [1.0, 1.0, 1.0]


@pytest.mark.asyncio
async def test_stderr_surfaced_as_error(judge: Any, no_sleep: AsyncMock) -> None:
    judge.fetch.side_effect = [report(2), report(11, stdout="", stderr="Traceback: boom")]
    poller = ExecutionPoller(judge)

    job = await poller.execute("raise", 71)

    assert job.status == JobStatus.FAILED
    assert poller.output == "Error: Traceback: boom"


@pytest.mark.asyncio
async def test_compile_output_used_when_stderr_empty(judge: Any, no_sleep: AsyncMock) -> None:
    judge.fetch.side_effect = [report(6, compile_output="main.c:1: error")]
    output = await ExecutionPoller(judge).run_execution("int main(", 50)
    assert output == "Error: main.c:1: error"


@pytest.mark.asyncio
async def test_accepted_job_succeeds(judge: Any, no_sleep: AsyncMock) -> None:
    judge.fetch.side_effect = [report(3, stdout="hi\n")]
    job = await ExecutionPoller(judge).execute("print('hi')", 71)

    assert job.status == JobStatus.SUCCEEDED
    assert job.submission_token == "tok-123"
    assert job.polls == 1
    assert job.stdout == "hi\n"


@pytest.mark.asyncio
async def test_submit_failure_is_terminal(judge: Any, no_sleep: AsyncMock) -> None:
    judge.submit.side_effect = httpx.ConnectError("down")
    poller = ExecutionPoller(judge)

    output = await poller.run_execution("print(1)", 71)

    assert output == FAILED_TEXT
    judge.submit.assert_awaited_once()
    judge.fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_poll_failure_is_terminal(judge: Any, no_sleep: AsyncMock) -> None:
    judge.fetch.side_effect = [report(1), RuntimeError("Judge status request failed: 500")]
    job = await ExecutionPoller(judge).execute("print(1)", 71)

    assert job.status == JobStatus.FAILED
    assert judge.fetch.await_count == 2


@pytest.mark.asyncio
async def test_max_attempts_stops_polling(judge: Any, no_sleep: AsyncMock) -> None:
    judge.fetch.return_value = report(2)
    poller = ExecutionPoller(judge, max_attempts=4)

    job = await poller.execute("while True: pass", 71)

    assert job.status == JobStatus.FAILED
    assert judge.fetch.await_count == 4
    assert poller.output == "Error: Execution did not finish after 4 status checks."


@pytest.mark.asyncio
async def test_backoff_grows_and_caps(judge: Any, no_sleep: AsyncMock) -> None:
    judge.fetch.side_effect = [report(1)] * 5 + [report(3, stdout="done")]
    poller = ExecutionPoller(judge, initial_delay=0.5, interval=1.0, backoff_factor=2.0, max_interval=5.0)

    await poller.run_execution("x", 71)

    assert [c.args[0] for c in no_sleep.await_args_list] == [0.5, 1.0, 2.0, 4.0, 5.0, 5.0]


@pytest.mark.asyncio
async def test_output_slot_transitions(judge: Any, no_sleep: AsyncMock) -> None:
    judge.fetch.side_effect = [report(3, stdout="final")]
    seen: list[str] = []
    poller = ExecutionPoller(judge, on_output=seen.append)

    await poller.run_execution("x", 71)

    assert seen == [RUNNING_TEXT, "final"]
    assert poller.output == "final"


@pytest.mark.asyncio
async def test_poll_requires_submission(judge: Any) -> None:
    with pytest.raises(ValueError, match="not been submitted"):
        await ExecutionPoller(judge).poll(ExecutionJob(source_code="x", language_id=71))


@pytest.mark.asyncio
async def test_submission_is_audited(judge: Any, no_sleep: AsyncMock) -> None:
    judge.fetch.side_effect = [report(3, stdout="ok")]
    veritas = MagicMock()
    veritas.log_pre_execution = AsyncMock(return_value="hash")

    await ExecutionPoller(judge, veritas=veritas).run_execution("print(1)", 71)

    veritas.log_pre_execution.assert_awaited_once_with("print(1)", 71)
