"""Tests for the command-line entry points."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from codecompleter.main import cli
from tests.helpers import chat_response, make_mock_response


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "add.py"
    path.write_text("def add(a, b):\n", encoding="utf-8")
    return path


@pytest.fixture
def mock_post():
    with patch("codecompleter.core.llm_client.requests.post") as post:
        yield post


class TestCompleteCommand:
    def test_prints_sanitized_completion(self, runner: CliRunner, source: Path, mock_post: MagicMock) -> None:
        mock_post.return_value = make_mock_response(json_data=chat_response("```python\n    return a + b\n```"))

        result = runner.invoke(cli, ["complete", str(source)])

        assert result.exit_code == 0, result.output
        assert result.stdout == "\n    return a + b\n"
        assert source.read_text(encoding="utf-8") == "def add(a, b):\n"

    def test_write_accepts_into_file(self, runner: CliRunner, source: Path, mock_post: MagicMock) -> None:
        mock_post.return_value = make_mock_response(json_data=chat_response("    return a + b\n"))

        result = runner.invoke(cli, ["complete", str(source), "--write"])

        assert result.exit_code == 0, result.output
        assert source.read_text(encoding="utf-8") == "def add(a, b):\n    return a + b\n"

    def test_offset_and_options_reach_request(self, runner: CliRunner, source: Path, mock_post: MagicMock) -> None:
        mock_post.return_value = make_mock_response(json_data=chat_response("x"))

        result = runner.invoke(
            cli,
            [
                "complete", str(source),
                "--offset", "8",
                "--endpoint", "http://other:1234/v1/chat/completions",
                "--max-tokens", "12",
                "--timeout", "4",
            ],
        )

        assert result.exit_code == 0, result.output
        args, kwargs = mock_post.call_args
        assert args[0] == "http://other:1234/v1/chat/completions"
        assert kwargs["json"]["max_tokens"] == 12
        assert kwargs["timeout"] == 4.0
        assert "```python\ndef add(\n```" in kwargs["json"]["messages"][1]["content"]

    def test_mode_option(self, runner: CliRunner, source: Path, mock_post: MagicMock) -> None:
        mock_post.return_value = make_mock_response(json_data=chat_response("x"))
        runner.invoke(cli, ["complete", str(source), "--mode", "hy-mode"])
        assert "Generate hy code" in mock_post.call_args.kwargs["json"]["messages"][1]["content"]

    def test_server_error_exits_1(self, runner: CliRunner, source: Path, mock_post: MagicMock) -> None:
        mock_post.return_value = make_mock_response(status_code=500)

        result = runner.invoke(cli, ["complete", str(source), "--write"])

        assert result.exit_code == 1
        assert "No completion produced." in result.output
        assert source.read_text(encoding="utf-8") == "def add(a, b):\n"

    def test_bad_config_exits_2(self, runner: CliRunner, source: Path, mock_post: MagicMock) -> None:
        result = runner.invoke(cli, ["complete", str(source), "--max-tokens", "0"])

        assert result.exit_code == 2
        assert "Configuration error" in result.output
        mock_post.assert_not_called()

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["complete", str(tmp_path / "nope.py")])
        assert result.exit_code == 2


class TestEditCommand:
    def test_launches_editor(self, runner: CliRunner, source: Path) -> None:
        pytest.importorskip("PyQt5.QtWidgets")
        with patch("codecompleter.hooking.qt_editor.run_editor", return_value=0) as run_editor:
            result = runner.invoke(cli, ["edit", str(source), "--context-limit", "50"])

        assert result.exit_code == 0, result.output
        settings = run_editor.call_args.args[0]
        assert settings.context_limit == 50
        assert run_editor.call_args.kwargs == {"path": str(source), "mode": None}
