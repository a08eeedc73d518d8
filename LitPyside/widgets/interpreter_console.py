"""Read-only transcript that receives snippets copied from a literate editor."""

from __future__ import annotations

from PySide6.QtGui import QFont, QTextCursor
from PySide6.QtWidgets import QPlainTextEdit

from LitPyside.core.grammar import CONTINUATION_PROMPT, PRIMARY_PROMPT


class InterpreterConsole(QPlainTextEdit):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setFont(QFont("Courier New", 10))
        self.setLineWrapMode(QPlainTextEdit.NoWrap)
        self.setMaximumBlockCount(5000)

    def send(self, command: str, output: str) -> None:
        lines = str(command or "").split("\n")
        echoed = [f"{PRIMARY_PROMPT} {lines[0]}"]
        echoed.extend(f"{CONTINUATION_PROMPT} {line}" for line in lines[1:])
        result = str(output or "").rstrip("\n")
        if result:
            echoed.append(result)
        self.appendPlainText("\n".join(echoed))

    def scroll_to_end(self) -> None:
        self.moveCursor(QTextCursor.End)
        self.ensureCursorVisible()
        bar = self.verticalScrollBar()
        bar.setValue(bar.maximum())

    def transcript(self) -> str:
        return self.toPlainText()


__all__ = ["InterpreterConsole"]
