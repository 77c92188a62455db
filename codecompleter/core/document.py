"""
document.py

The editing surface as seen by the completion lifecycle. Hosts (the Qt editor
in hooking/qt_editor.py, the headless CLI) provide something with this shape;
TextBuffer is the plain in-memory version.
"""


class Document:
    """
    Minimal interface the lifecycle needs from an editor buffer.

    Attributes/properties expected from implementations:
      - text:     full buffer contents (str)
      - cursor:   caret offset in characters
      - mode:     mode identifier, e.g. "python-mode"
      - revision: integer that changes on every content mutation
    """

    text = ""
    cursor = 0
    mode = ""
    revision = 0

    def insert(self, position, text):
        """Insert `text` at character offset `position`."""
        raise NotImplementedError


class TextBuffer(Document):
    """In-memory document used by the headless CLI and by the tests."""

    def __init__(self, text="", cursor=None, mode="text-mode"):
        self._text = text
        self._revision = 0
        self.mode = mode
        self.cursor = len(text) if cursor is None else cursor

    @property
    def text(self):
        return self._text

    @property
    def revision(self):
        return self._revision

    @property
    def cursor(self):
        return self._cursor

    @cursor.setter
    def cursor(self, value):
        # Moving the caret is not an edit, the revision stays put.
        self._cursor = max(0, min(value, len(self._text)))

    def insert(self, position, text):
        if not 0 <= position <= len(self._text):
            raise IndexError(f"insert position {position} outside buffer of length {len(self._text)}")
        self._text = self._text[:position] + text + self._text[position:]
        if self._cursor >= position:
            self._cursor += len(text)
        self._revision += 1

    def delete(self, start, end):
        """Remove the characters in [start, end)."""
        start = max(0, start)
        end = min(end, len(self._text))
        if start >= end:
            return
        self._text = self._text[:start] + self._text[end:]
        if self._cursor >= end:
            self._cursor -= end - start
        elif self._cursor > start:
            self._cursor = start
        self._revision += 1
