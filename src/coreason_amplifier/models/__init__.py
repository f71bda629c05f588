# src/coreason_amplifier/models/__init__.py

"""
Data models for review batches and judge executions.
"""

from .analysis import AnalysisOutcome, BatchProgress, FileStatus, ParsedResponse, Section
from .execution import ExecutionJob, JobStatus, JudgeReport, JudgeStatus
from .source import SourceFile

__all__ = [
    "AnalysisOutcome",
    "BatchProgress",
    "ExecutionJob",
    "FileStatus",
    "JobStatus",
    "JudgeReport",
    "JudgeStatus",
    "ParsedResponse",
    "Section",
    "SourceFile",
]
