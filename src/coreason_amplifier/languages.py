# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_amplifier

"""Judge0 CE language ids keyed by file extension and language name."""

JUDGE0_LANGUAGES: dict[str, int] = {
    "bash": 46,
    "c": 50,
    "csharp": 51,
    "cpp": 54,
    "go": 60,
    "java": 62,
    "javascript": 63,
    "lua": 64,
    "php": 68,
    "python": 71,
    "ruby": 72,
    "rust": 73,
    "typescript": 74,
    "kotlin": 78,
    "r": 80,
    "swift": 83,
}

EXTENSION_ALIASES: dict[str, str] = {
    "sh": "bash",
    "h": "c",
    "cs": "csharp",
    "cc": "cpp",
    "cxx": "cpp",
    "hpp": "cpp",
    "js": "javascript",
    "mjs": "javascript",
    "jsx": "javascript",
    "py": "python",
    "rb": "ruby",
    "rs": "rust",
    "ts": "typescript",
    "tsx": "typescript",
    "kt": "kotlin",
}


def language_id_for(name_or_extension: str, default: int | None = None) -> int | None:
    """Resolve a language name or file extension to a Judge0 language id.

    Lookup is case-insensitive and ignores a leading dot. Returns ``default``
    when the language is unknown.
    """
    key = name_or_extension.strip().lower().lstrip(".")
    key = EXTENSION_ALIASES.get(key, key)
    return JUDGE0_LANGUAGES.get(key, default)
