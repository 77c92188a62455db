"""Shared test fixtures for the codecompleter test suite."""

import os
from unittest.mock import MagicMock

import pytest

from codecompleter.config.settings import Settings
from codecompleter.core.document import TextBuffer
from codecompleter.core.llm_client import LLMClient
from tests.helpers import RecordingRenderer


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep CODECOMPLETER_* variables and any local .env out of the tests."""
    for name in list(os.environ):
        if name.upper().startswith("CODECOMPLETER_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def buffer() -> TextBuffer:
    return TextBuffer("def add(a, b):\n", mode="python-mode")


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def mock_llm_client() -> MagicMock:
    return MagicMock(spec=LLMClient)
