import logging
import os
import sys
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QApplication, QFileDialog, QMainWindow, QMessageBox, QSplitter

from LitPyside.core.settings import shared_settings
from LitPyside.widgets import InterpreterConsole, LiterateEditor

APP_NAME = "LitPyside"
DEBUG_ENV = "LITPYSIDE_DEBUG"


class LiterateWindow(QMainWindow):
    def __init__(self, file_path: str | None = None):
        super().__init__()
        self.file_path: Path | None = None
        self.console = InterpreterConsole(self)
        self.editor = LiterateEditor(self, target=self.console)
        self.editor.messageRequested.connect(lambda message: self.statusBar().showMessage(message, 4000))

        splitter = QSplitter(Qt.Vertical, self)
        splitter.addWidget(self.editor)
        splitter.addWidget(self.console)
        splitter.setStretchFactor(0, 4)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)
        self._build_menus()
        self.resize(1100, 760)

        if file_path:
            self.open_file(file_path)
        self._update_title()

    def _build_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        for label, shortcut, handler in (
            ("&Open...", QKeySequence.Open, self._choose_file),
            ("&Save", QKeySequence.Save, self.save_file),
            ("&Quit", QKeySequence.Quit, self.close),
        ):
            action = QAction(label, self)
            action.setShortcut(shortcut)
            action.triggered.connect(lambda _checked=False, fn=handler: fn())
            file_menu.addAction(action)

        literate_menu = self.menuBar().addMenu("&Literate")
        for action in self.editor.command_actions.values():
            literate_menu.addAction(action)

        reveal = QAction("Reveal markup at point", self)
        reveal.setCheckable(True)
        reveal.setChecked(shared_settings().snapshot().reveal_at_point)
        reveal.toggled.connect(lambda checked: shared_settings().set("reveal_at_point", checked))
        literate_menu.addSeparator()
        literate_menu.addAction(reveal)

    def _update_title(self) -> None:
        name = self.file_path.name if self.file_path is not None else "untitled"
        self.setWindowTitle(f"{APP_NAME} [{name}]")

    def _choose_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open literate source", "", "Python (*.py);;All files (*)")
        if path:
            self.open_file(path)

    def open_file(self, path: str) -> None:
        candidate = Path(path).expanduser()
        try:
            content = candidate.read_text(encoding="utf-8")
        except OSError as exc:
            QMessageBox.warning(self, APP_NAME, f"Could not open {candidate}:\n{exc}")
            return
        self.editor.setPlainText(content)
        self.file_path = candidate
        self._update_title()

    def save_file(self) -> None:
        if self.file_path is None:
            path, _ = QFileDialog.getSaveFileName(self, "Save literate source", "", "Python (*.py)")
            if not path:
                return
            self.file_path = Path(path)
        try:
            self.file_path.write_text(self.editor.toPlainText(), encoding="utf-8")
        except OSError as exc:
            QMessageBox.warning(self, APP_NAME, f"Could not save {self.file_path}:\n{exc}")
            return
        self.statusBar().showMessage(f"Saved {self.file_path}", 3000)
        self._update_title()

    def closeEvent(self, event):
        self.editor.shutdown()
        super().closeEvent(event)


def main() -> int:
    if os.environ.get(DEBUG_ENV):
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    app = QApplication(sys.argv)
    app.setStyle("Fusion")
    app.setApplicationName(APP_NAME)
    window = LiterateWindow(sys.argv[1] if len(sys.argv) > 1 else None)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
