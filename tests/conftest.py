from typing import Any, Generator
from unittest.mock import AsyncMock, patch

import pytest

from coreason_amplifier.backend import ReviewBackend
from coreason_amplifier.models import SourceFile


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    with patch.dict("os.environ", {}, clear=True):
        yield


@pytest.fixture
def source_files() -> list[SourceFile]:
    return [
        SourceFile(name="a.py", path="src/a.py", content="print('a')"),
        SourceFile(name="b.js", path="src/b.js", content="console.log('b')"),
        SourceFile(name="c.go", path="src/c.go", content="package main"),
    ]


@pytest.fixture
def mock_backend() -> Any:
    backend = AsyncMock(spec=ReviewBackend)
    backend.review = AsyncMock(return_value="<SCORE:80>Looks fine.")
    return backend


@pytest.fixture
def no_sleep() -> Generator[AsyncMock, None, None]:
    with patch("coreason_amplifier.poller.asyncio.sleep", new_callable=AsyncMock) as mock:
        yield mock
