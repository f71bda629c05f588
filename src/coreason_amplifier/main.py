# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_amplifier

from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent

from coreason_amplifier.amplifier import AmplifierAsync
from coreason_amplifier.languages import language_id_for
from coreason_amplifier.models import AnalysisOutcome, Section, SourceFile
from coreason_amplifier.utils.logger import logger

SECTION_TITLES = {
    Section.ANALYSIS: "Analysis",
    Section.SUGGESTIONS: "Suggestions",
    Section.SECURITY: "Security",
    Section.PERFORMANCE: "Performance",
}

# Initialize Review Logic
amplifier = AmplifierAsync()

# Initialize MCP Server
mcp = FastMCP("coreason-amplifier")


def format_outcome(outcome: AnalysisOutcome) -> str:
    """Render one outcome as plain text. Empty sections are skipped."""
    lines = [f"{outcome.path}: score {outcome.score}/100 ({outcome.grade})"]

    if outcome.is_error:
        lines.append(outcome.raw_narrative)
        return "\n".join(lines)

    for section in Section:
        entries = outcome.sections.get(section)
        if not entries:
            continue
        lines.append("")
        lines.append(f"## {SECTION_TITLES[section]}")
        lines.extend(f"- {entry}" for entry in entries)

    if outcome.corrected_code:
        lines.append("")
        lines.append("## Corrected Code")
        lines.append(f"```\n{outcome.corrected_code}\n```")

    return "\n".join(lines)


async def _review(files: list[SourceFile]) -> list[TextContent]:
    outcomes = await amplifier.validate(files)
    return [TextContent(type="text", text=format_outcome(o)) for o in outcomes]


@mcp.tool()  # type: ignore[misc]
async def review_files(paths: list[str]) -> list[TextContent]:
    """
    Review source files on disk.
    Returns one report per file with a score, findings and corrected code.
    """
    try:
        files = await amplifier.load(paths)
        return await _review(files)
    except Exception as e:
        logger.error(f"review_files failed: {e}")
        return [TextContent(type="text", text=f"Error reviewing files: {e!s}")]


@mcp.tool()  # type: ignore[misc]
async def review_sources(files: list[SourceFile]) -> list[TextContent]:
    """
    Review in-memory sources given as name, path and content.
    """
    try:
        return await _review(files)
    except Exception as e:
        logger.error(f"review_sources failed: {e}")
        return [TextContent(type="text", text=f"Error reviewing sources: {e!s}")]


@mcp.tool()  # type: ignore[misc]
async def run_code(code: str, language: str = "python") -> str:
    """
    Execute code on the remote judge.
    Returns stdout, or stderr prefixed with 'Error:'.
    """
    language_id = language_id_for(language)
    if language_id is None:
        return f"Error: unsupported language '{language}'"
    try:
        return await amplifier.run_code(code, language_id)
    except Exception as e:
        return f"Error executing code: {e!s}"


def main() -> None:
    """Entry point for the MCP server."""
    mcp.run()


if __name__ == "__main__":  # pragma: no cover
    main()
