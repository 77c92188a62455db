"""Tests for context window and language tag extraction."""

import pytest

from codecompleter.core.context import extract, language_tag, mode_for_path
from codecompleter.core.document import TextBuffer


class TestExtractWindow:
    @pytest.mark.parametrize("cursor", [0, 1, 5, 9, 10, 26])
    @pytest.mark.parametrize("limit", [0, 1, 4, 10, 100])
    def test_bounded_and_ends_at_cursor(self, cursor: int, limit: int) -> None:
        text = "abcdefghijklmnopqrstuvwxyz"
        doc = TextBuffer(text, cursor=cursor)

        result = extract(doc, limit)

        assert len(result.text) <= limit
        assert text[:cursor].endswith(result.text)
        assert result.text == text[max(0, cursor - limit):cursor]

    def test_never_reads_past_cursor(self) -> None:
        doc = TextBuffer("before|after", cursor=7)
        assert extract(doc, 700).text == "before|"

    def test_explicit_cursor_overrides_caret(self) -> None:
        doc = TextBuffer("0123456789", cursor=10)
        assert extract(doc, 3, cursor=5).text == "234"

    def test_cursor_clamped_to_buffer(self) -> None:
        doc = TextBuffer("short")
        assert extract(doc, 700, cursor=99).text == "short"
        assert extract(doc, 700, cursor=-4).text == ""

    def test_negative_limit_rejected(self) -> None:
        with pytest.raises(ValueError):
            extract(TextBuffer("x"), -1)

    def test_does_not_touch_document(self) -> None:
        doc = TextBuffer("print(1)\n", mode="python-mode")
        revision = doc.revision
        extract(doc, 4)
        assert doc.text == "print(1)\n"
        assert doc.revision == revision

    def test_language_tag_from_mode(self) -> None:
        doc = TextBuffer("fn main() {", mode="rust-mode")
        assert extract(doc, 700).language_tag == "rust"


class TestLanguageTag:
    @pytest.mark.parametrize(
        ("mode", "expected"),
        [
            ("python-mode", "python"),
            ("emacs-lisp-mode", "emacs"),
            ("  -c++-mode", "c"),
            ("<js2>", "js2"),
            ("python_ts-mode", "python_ts"),
        ],
    )
    def test_first_word_run(self, mode: str, expected: str) -> None:
        assert language_tag(mode) == expected

    @pytest.mark.parametrize("mode", ["", "---", "+ + !", None])
    def test_no_word_characters(self, mode: str | None) -> None:
        assert language_tag(mode) == ""


class TestModeForPath:
    def test_known_suffix(self) -> None:
        assert mode_for_path("src/app/main.py") == "python-mode"
        assert mode_for_path("LIB.RS") == "rust-mode"

    def test_unknown_suffix(self) -> None:
        assert mode_for_path("notes.xyz") == "text-mode"
        assert mode_for_path(None) == "text-mode"
