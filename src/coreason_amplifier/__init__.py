# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_amplifier

"""
coreason-amplifier
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .amplifier import Amplifier, AmplifierAsync
from .backend import JudgeClient, ReviewBackend
from .config import AmplifierConfig
from .models import AnalysisOutcome, BatchProgress, ExecutionJob, ParsedResponse, Section, SourceFile
from .orchestrator import AnalysisOrchestrator
from .parser import RegexResponseParser, ResponseParser, parse_response
from .poller import ExecutionPoller

__all__ = [
    "Amplifier",
    "AmplifierAsync",
    "AmplifierConfig",
    "AnalysisOrchestrator",
    "AnalysisOutcome",
    "BatchProgress",
    "ExecutionJob",
    "ExecutionPoller",
    "JudgeClient",
    "ParsedResponse",
    "RegexResponseParser",
    "ResponseParser",
    "ReviewBackend",
    "Section",
    "SourceFile",
    "parse_response",
]
