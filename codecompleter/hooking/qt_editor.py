"""
qt_editor.py

A small PyQt5 code editor hosting the completion lifecycle.

Key bindings:
    Ctrl+Space  trigger completion
    Tab         accept the preview (plain Tab when nothing is shown)
    Escape      discard the preview
Any other edit discards a showing preview before it is applied.
"""

import logging
import sys
from pathlib import Path

from PyQt5 import QtCore, QtGui, QtWidgets

from ..core import context
from ..core.core import CompletionSession
from ..core.document import Document
from ..core.overlay import GhostTextOverlay

logger = logging.getLogger(__name__)

_MODIFIER_KEYS = {
    QtCore.Qt.Key_Shift,
    QtCore.Qt.Key_Control,
    QtCore.Qt.Key_Alt,
    QtCore.Qt.Key_Meta,
    QtCore.Qt.Key_AltGr,
    QtCore.Qt.Key_CapsLock,
}


class QtDocument(Document):
    """
    Adapts a QPlainTextEdit to the Document interface.

    QTextDocument positions count UTF-16 code units while the lifecycle works
    in Python string indexes; `to_qt` and `from_qt` translate between the two
    so characters outside the BMP (emoji, some CJK) do not shift offsets.
    """

    def __init__(self, editor, mode):
        self.editor = editor
        self.mode = mode
        self._revision = 0
        editor.document().contentsChange.connect(self._on_contents_change)

    def _on_contents_change(self, position, removed, added):
        self._revision += 1

    @property
    def text(self):
        return self.editor.toPlainText()

    @property
    def cursor(self):
        return self.from_qt(self.editor.textCursor().position())

    @property
    def revision(self):
        return self._revision

    def insert(self, position, text):
        cursor = QtGui.QTextCursor(self.editor.document())
        cursor.setPosition(self.to_qt(position))
        cursor.insertText(text)
        self.editor.setTextCursor(cursor)

    def to_qt(self, index):
        """Python string index -> QTextDocument position."""
        return len(self.text[:index].encode("utf-16-le")) // 2

    def from_qt(self, position):
        """QTextDocument position -> Python string index."""
        units = self.text.encode("utf-16-le")[: position * 2]
        # A position inside a surrogate pair rounds down to the character start
        return len(units.decode("utf-16-le", errors="ignore"))


class CodeEditor(QtWidgets.QPlainTextEdit):
    """Plain-text code editor with inline LLM completion."""

    # Carries callables from the inference thread back to the GUI thread
    _dispatch = QtCore.pyqtSignal(object)

    def __init__(self, settings, mode=None, llm_client=None, parent=None):
        super().__init__(parent)
        font = QtGui.QFontDatabase.systemFont(QtGui.QFontDatabase.FixedFont)
        self.setFont(font)
        self.setLineWrapMode(QtWidgets.QPlainTextEdit.NoWrap)
        self.setTabStopDistance(QtGui.QFontMetricsF(font).horizontalAdvance(" ") * 4)

        self.document_adapter = QtDocument(self, mode or context.DEFAULT_MODE)
        self.session = CompletionSession(
            self.document_adapter,
            settings,
            llm_client=llm_client,
            renderer=GhostTextOverlay(self, self.document_adapter),
        )
        self._dispatch.connect(self._run_dispatched)

    def set_mode(self, mode):
        self.document_adapter.mode = mode

    # ---------------------------------------------------------------------
    # Commands
    # ---------------------------------------------------------------------

    def trigger_completion(self):
        logger.debug("Completion triggered at %d", self.textCursor().position())
        self.session.complete_async(dispatch=self._dispatch.emit)

    def accept_completion(self):
        return self.session.accept()

    def discard_completion(self):
        return self.session.discard()

    def _run_dispatched(self, fn):
        fn()

    # ---------------------------------------------------------------------
    # Qt overrides
    # ---------------------------------------------------------------------

    def keyPressEvent(self, event):
        key = event.key()
        if key == QtCore.Qt.Key_Space and event.modifiers() & QtCore.Qt.ControlModifier:
            self.trigger_completion()
            return

        if self.session.preview.preview is not None:
            if key == QtCore.Qt.Key_Tab:
                self.accept_completion()
                return
            if key == QtCore.Qt.Key_Escape:
                self.discard_completion()
                return
            if key not in _MODIFIER_KEYS:
                self.discard_completion()

        super().keyPressEvent(event)

    def mousePressEvent(self, event):
        # Clicking elsewhere abandons the suggestion like any other edit
        self.discard_completion()
        super().mousePressEvent(event)


class EditorWindow(QtWidgets.QMainWindow):
    """Top-level window: one CodeEditor plus save/quit and completion menus."""

    def __init__(self, settings, path=None, mode=None, llm_client=None):
        super().__init__()
        self.path = Path(path) if path else None
        self.editor = CodeEditor(settings, mode=mode or context.mode_for_path(path), llm_client=llm_client)
        self.setCentralWidget(self.editor)
        self.resize(900, 700)

        file_menu = self.menuBar().addMenu("&File")
        save_action = file_menu.addAction("&Save")
        save_action.setShortcut(QtGui.QKeySequence.Save)
        save_action.triggered.connect(self.save)
        quit_action = file_menu.addAction("&Quit")
        quit_action.setShortcut(QtGui.QKeySequence.Quit)
        quit_action.triggered.connect(self.close)

        complete_menu = self.menuBar().addMenu("&Completion")
        complete_menu.addAction("Trigger\tCtrl+Space", self.editor.trigger_completion)
        complete_menu.addAction("Accept\tTab", self.editor.accept_completion)
        complete_menu.addAction("Discard\tEsc", self.editor.discard_completion)

        if self.path is not None and self.path.exists():
            self.editor.setPlainText(self.path.read_text(encoding="utf-8"))
        self._update_title()
        self.statusBar().showMessage(f"Mode: {self.editor.document_adapter.mode}  |  Ctrl+Space to complete")

    def save(self):
        if self.path is None:
            name, _ = QtWidgets.QFileDialog.getSaveFileName(self, "Save file")
            if not name:
                return
            self.path = Path(name)
            self.editor.set_mode(context.mode_for_path(self.path))
        self.path.write_text(self.editor.toPlainText(), encoding="utf-8")
        self._update_title()
        self.statusBar().showMessage(f"Saved {self.path}", 3000)
        logger.info("Saved %s", self.path)

    def _update_title(self):
        self.setWindowTitle(f"codecompleter - {self.path.name if self.path else 'untitled'}")


def run_editor(settings, path=None, mode=None, llm_client=None):
    """
    Launch the editor and block in the Qt event loop.

    :return: The Qt application's exit code.
    """
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
    window = EditorWindow(settings, path=path, mode=mode, llm_client=llm_client)
    window.show()
    return app.exec_()
