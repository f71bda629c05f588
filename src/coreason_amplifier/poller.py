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
from typing import Callable

from loguru import logger

from coreason_amplifier.backend import JudgeClient
from coreason_amplifier.integrations.veritas import VeritasIntegrator
from coreason_amplifier.models import ExecutionJob, JobStatus

RUNNING_TEXT = "Running..."
FAILED_TEXT = "Execution failed."


class ExecutionPoller:
    """Drives a judge submission from submit to a terminal status.

    The poller owns a single ``output`` slot that is overwritten on every
    transition: ``"Running..."`` once a run starts, then the final text.
    """

    def __init__(
        self,
        judge: JudgeClient,
        initial_delay: float = 1.0,
        interval: float = 1.0,
        backoff_factor: float = 1.0,
        max_interval: float = 10.0,
        max_attempts: int | None = None,
        veritas: VeritasIntegrator | None = None,
        on_output: Callable[[str], None] | None = None,
    ):
        """Initializes the ExecutionPoller.

        Args:
            judge: The execution service client.
            initial_delay: Seconds to wait after submit before the first poll.
            interval: Seconds between the first polls.
            backoff_factor: Multiplier applied to the interval after every
                non-terminal poll. 1.0 keeps a fixed interval.
            max_interval: Upper bound for the grown interval.
            max_attempts: Maximum number of polls. ``None`` polls until the
                judge reports a terminal status.
            veritas: Audit logger for submitted code.
            on_output: Called with the new text whenever ``output`` changes.
        """
        self.judge = judge
        self.initial_delay = initial_delay
        self.interval = interval
        self.backoff_factor = backoff_factor
        self.max_interval = max_interval
        self.max_attempts = max_attempts
        self.veritas = veritas or VeritasIntegrator(enabled=False)
        self.on_output = on_output
        self.output = ""

    def _set_output(self, text: str) -> None:
        self.output = text
        if self.on_output:
            self.on_output(text)

    async def submit(self, job: ExecutionJob) -> ExecutionJob:
        """Send the job's code to the judge and record the submission token.

        Raises:
            Exception: Any transport or judge error; submission is not retried.
        """
        await self.veritas.log_pre_execution(job.source_code, job.language_id)
        job.submission_token = await self.judge.submit(job.source_code, job.language_id)
        job.status = JobStatus.QUEUED
        logger.info(f"Submitted execution job {job.submission_token} (language {job.language_id})")
        return job

    async def poll(self, job: ExecutionJob) -> ExecutionJob:
        """Poll the judge until the job is terminal or attempts run out.

        Raises:
            ValueError: If the job was never submitted.
            Exception: Any transport or judge error during a poll.
        """
        if not job.submission_token:
            raise ValueError("Job has not been submitted")

        delay = self.initial_delay
        interval = self.interval

        while True:
            await asyncio.sleep(delay)
            report = await self.judge.fetch(job.submission_token)
            job.apply(report)

            if job.status.is_terminal:
                logger.info(f"Execution job {job.submission_token} finished: {job.status.value} after {job.polls} polls")
                return job

            if self.max_attempts is not None and job.polls >= self.max_attempts:
                logger.warning(f"Execution job {job.submission_token} still pending after {job.polls} polls. Giving up.")
                job.status = JobStatus.FAILED
                job.message = f"Execution did not finish after {job.polls} status checks."
                return job

            delay = interval
            interval = min(interval * self.backoff_factor, self.max_interval)

    async def execute(self, source_code: str, language_id: int) -> ExecutionJob:
        """Submit and poll a job, absorbing errors into a failed job."""
        job = ExecutionJob(source_code=source_code, language_id=language_id)
        self._set_output(RUNNING_TEXT)

        try:
            await self.submit(job)
        except Exception as e:
            logger.error(f"Failed to submit code for execution: {e}")
            job.status = JobStatus.FAILED
            job.message = FAILED_TEXT
            self._set_output(FAILED_TEXT)
            return job

        try:
            await self.poll(job)
        except Exception as e:
            logger.error(f"Failed to poll execution job {job.submission_token}: {e}")
            job.status = JobStatus.FAILED
            job.message = FAILED_TEXT
            self._set_output(FAILED_TEXT)
            return job

        self._set_output(job.display_output())
        return job

    async def run_execution(self, source_code: str, language_id: int) -> str:
        """Run code on the judge and return the text to show the user.

        Returns stdout when non-empty, otherwise stderr prefixed with ``Error:``.
        """
        await self.execute(source_code, language_id)
        return self.output
