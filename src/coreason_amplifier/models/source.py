# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_amplifier

from pydantic import BaseModel, ConfigDict, model_validator


def extension_of(name: str) -> str:
    """Return the text after the last dot of a file name.

    A name without a dot is its own extension (``Makefile``); a trailing dot gives ``""``.
    """
    return name.rsplit(".", 1)[-1]


class SourceFile(BaseModel):
    """A source file submitted for review.

    Attributes:
        name: The base file name (e.g. ``main.py``).
        path: The path shown to the user; identifies the file within a batch.
        content: The full decoded text of the file.
        extension: The file extension without the dot. Derived from ``name`` when omitted.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    content: str
    extension: str = ""

    @model_validator(mode="before")
    @classmethod
    def _derive_extension(cls, data: object) -> object:
        if isinstance(data, dict) and not data.get("extension"):
            data = {**data, "extension": extension_of(str(data.get("name", "")))}
        return data
