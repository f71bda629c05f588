# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_amplifier

import re
from typing import Protocol, runtime_checkable

from coreason_amplifier.models import ParsedResponse, Section

SCORE_PATTERN = re.compile(r"<SCORE:(\d+)>")
THINK_PATTERN = re.compile(r"<think>.*?</think>", re.DOTALL)
CODE_BLOCK_PATTERN = re.compile(r"```(?:\w+\n)?(.*?)```", re.DOTALL)

# Evaluated in order; the first matching trigger wins for a line.
SECTION_TRIGGERS: tuple[tuple[Section, tuple[str, ...]], ...] = (
    (Section.SECURITY, ("security", "vulnerability")),
    (Section.PERFORMANCE, ("performance", "optimization")),
    (Section.SUGGESTIONS, ("suggest", "recommend")),
)


@runtime_checkable
class ResponseParser(Protocol):
    """
    Protocol for turning a raw model response into a structured review fragment.
    Implementations must never raise.
    """

    def parse(self, raw_response: str) -> ParsedResponse:
        ...


def extract_score(text: str) -> int:
    """Return the first ``<SCORE:N>`` value clamped to [0, 100], or 0 when absent."""
    match = SCORE_PATTERN.search(text)
    if not match:
        return 0
    return min(max(int(match.group(1)), 0), 100)


def extract_corrected_code(text: str) -> str | None:
    """Return the trimmed interior of the first fenced code block, if any."""
    match = CODE_BLOCK_PATTERN.search(text)
    if not match:
        return None
    return match.group(1).strip() or None


def clean_narrative(text: str) -> str:
    """Strip score tags, thinking blocks and the first fenced code block."""
    text = CODE_BLOCK_PATTERN.sub("", text, count=1)
    text = SCORE_PATTERN.sub("", text)
    text = THINK_PATTERN.sub("", text)
    return text.strip()


def classify_sections(narrative: str) -> dict[Section, list[str]]:
    """Bucket narrative lines into sections using sticky keyword triggers.

    The cursor starts at ``analysis`` and only moves when a line mentions a
    trigger keyword; the triggering line belongs to the new section.
    """
    sections: dict[Section, list[str]] = {}
    current = Section.ANALYSIS

    for line in narrative.splitlines():
        lowered = line.lower()
        for section, keywords in SECTION_TRIGGERS:
            if any(keyword in lowered for keyword in keywords):
                current = section
                break

        stripped = line.strip()
        if stripped:
            sections.setdefault(current, []).append(stripped)

    return sections


class RegexResponseParser:
    """Tolerant pattern scanner for the ``<SCORE:N>`` / fenced-code response format."""

    def parse(self, raw_response: str) -> ParsedResponse:
        corrected_code = extract_corrected_code(raw_response)
        narrative = clean_narrative(raw_response)
        return ParsedResponse(
            score=extract_score(raw_response),
            corrected_code=corrected_code,
            has_corrections=corrected_code is not None,
            narrative=narrative,
            sections=classify_sections(narrative),
        )


_default_parser = RegexResponseParser()


def parse_response(raw_response: str) -> ParsedResponse:
    """Parse a raw model response with the default parser."""
    return _default_parser.parse(raw_response)
