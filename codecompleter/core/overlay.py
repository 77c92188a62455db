"""
Ghost-text overlay that draws a completion preview on top of a QPlainTextEdit.

The preview is a child label of the editor viewport, never part of the
QTextDocument, so undo history and saved files only ever see accepted text.
"""

from PyQt5 import QtCore, QtGui, QtWidgets

from .preview import PreviewRenderer

# Muted, italic and translucent so a preview never reads as committed code
GHOST_STYLE = """
    color: rgba(128, 128, 128, 200);
    font-style: italic;
    background-color: rgba(127, 127, 127, 24);
    border: none;
"""


class GhostTextLabel(QtWidgets.QLabel):
    """A borderless label that displays preview text at a viewport position."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setTextFormat(QtCore.Qt.PlainText)
        self.setAttribute(QtCore.Qt.WA_TransparentForMouseEvents)
        self.setFocusPolicy(QtCore.Qt.NoFocus)
        self.setAlignment(QtCore.Qt.AlignLeft | QtCore.Qt.AlignTop)
        self.setStyleSheet(GHOST_STYLE)
        self.setToolTip("Tab to accept, Esc to discard")
        self.hide()  # hidden by default

    def show_text(self, text, x=0, y=0):
        """Show `text` with its top-left corner at viewport coords (x, y)."""
        self.setText(text)
        self.adjustSize()
        self.move(x, y)
        self.raise_()
        self.show()


class GhostTextOverlay(PreviewRenderer):
    """
    PreviewRenderer for hooking.qt_editor.CodeEditor.

    The first line of the preview continues from the anchor on the same row;
    later lines are laid out from the editor's left margin like real code
    would be.
    """

    def __init__(self, editor, document):
        """
        :param editor:   the QPlainTextEdit the preview belongs to.
        :param document: its QtDocument, used to map anchor indexes to Qt positions.
        """
        self.editor = editor
        self.document = document
        self.label = GhostTextLabel(editor.viewport())
        self.label.setFont(editor.font())
        self._preview = None
        # Keep the overlay glued to its anchor while scrolling
        editor.verticalScrollBar().valueChanged.connect(self._reposition)
        editor.horizontalScrollBar().valueChanged.connect(self._reposition)

    def render(self, preview):
        self._preview = preview
        self._reposition()

    def clear(self):
        self._preview = None
        self.label.hide()
        self.label.clear()

    def _reposition(self, *_):
        if self._preview is None:
            return
        cursor = QtGui.QTextCursor(self.editor.document())
        position = self.document.to_qt(self._preview.anchor.position)
        position = min(position, self.editor.document().characterCount() - 1)
        cursor.setPosition(max(0, position))
        rect = self.editor.cursorRect(cursor)

        text = self._preview.text
        x = rect.left()
        if "\n" in text:
            # Multi-line: start from the left edge and pad the first line out to the anchor column
            left = int(self.editor.contentOffset().x() + self.editor.document().documentMargin())
            text = " " * _column_chars(self.editor, x - left) + text
            x = left
        self.label.show_text(text, x=x, y=rect.top())


def _column_chars(editor, x):
    metrics = QtGui.QFontMetrics(editor.font())
    width = metrics.horizontalAdvance(" ") or 1
    return max(0, int(x / width))
