"""
context.py

Derives the bounded text window and language tag sent to the model.
Completion is always a forward continuation: nothing after the cursor is read.
"""

import os
import re
from dataclasses import dataclass

_WORD_RE = re.compile(r"\w+")

# File suffix -> mode identifier. Hosts without a real mode system use this.
MODE_BY_SUFFIX = {
    ".py": "python-mode",
    ".pyi": "python-mode",
    ".js": "js-mode",
    ".mjs": "js-mode",
    ".ts": "typescript-mode",
    ".tsx": "typescript-mode",
    ".c": "c-mode",
    ".h": "c-mode",
    ".cc": "cpp-mode",
    ".cpp": "cpp-mode",
    ".hpp": "cpp-mode",
    ".rs": "rust-mode",
    ".go": "go-mode",
    ".java": "java-mode",
    ".rb": "ruby-mode",
    ".sh": "sh-mode",
    ".el": "emacs-lisp-mode",
    ".lua": "lua-mode",
    ".sql": "sql-mode",
    ".html": "html-mode",
    ".css": "css-mode",
}
DEFAULT_MODE = "text-mode"


@dataclass(frozen=True)
class ExtractedContext:
    text: str
    language_tag: str


def language_tag(mode):
    """
    Reduce a mode identifier to its leading word token.

    "python-mode" -> "python", "  -c++" -> "c", "---" -> "".
    """
    match = _WORD_RE.search(mode or "")
    return match.group(0) if match else ""


def mode_for_path(path):
    """Guess a mode identifier from a file name."""
    if not path:
        return DEFAULT_MODE
    _, suffix = os.path.splitext(str(path))
    return MODE_BY_SUFFIX.get(suffix.lower(), DEFAULT_MODE)


def extract(document, limit, cursor=None) -> ExtractedContext:
    """
    Return the text window [max(0, cursor - limit), cursor) and the language tag.

    :param document: Anything shaped like core.document.Document.
    :param limit:    Maximum number of characters of context.
    :param cursor:   Offset to complete at; defaults to the document's caret.
                     Out of range offsets are clamped to the buffer.
    """
    if limit < 0:
        raise ValueError(f"context limit must be >= 0, got {limit}")

    text = document.text
    if cursor is None:
        cursor = document.cursor
    cursor = max(0, min(cursor, len(text)))

    start = max(0, cursor - limit)
    return ExtractedContext(text=text[start:cursor], language_tag=language_tag(document.mode))
