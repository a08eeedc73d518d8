"""QPlainTextEdit host for a LiterateSession."""

from __future__ import annotations

import logging
from typing import Callable

from PySide6.QtCore import QRect, Qt, QTimer, Signal
from PySide6.QtGui import QAction, QColor, QFont, QKeySequence, QPainter, QPalette, QTextCursor
from PySide6.QtWidgets import QPlainTextEdit

from LitPyside.core.execution import ExecutionBackend, InProcessInterpreter
from LitPyside.core.session import ExecutionTarget, LiterateSession
from LitPyside.core.settings import LiterateSettingsStore
from LitPyside.core.snippets import NoSnippetFound
from LitPyside.core.titles import TextEdit

from .literate_highlighter import LiterateHighlighter
from .syntax_highlighters import delegate_highlight

logger = logging.getLogger(__name__)

_OVERLAY_MAX_LINES = 10

COMMAND_SHORTCUTS: dict[str, str] = {
    "cycle_title": "Ctrl+Alt+T",
    "copy_snippet_to_target": "Ctrl+Alt+C",
    "eval_snippet_inline": "Ctrl+Return",
    "eval_block_inline": "Ctrl+Shift+Return",
    "toggle_quotes_markup": "Ctrl+Alt+Q",
    "toggle_title_markup": "Ctrl+Alt+H",
    "hide_all_markup": "Ctrl+Alt+A",
}


class QtDebounceScheduler:
    """One single-shot QTimer; scheduling again restarts it with the new callback."""

    def __init__(self, parent=None):
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._callback: Callable[[], None] | None = None

    @property
    def pending(self) -> bool:
        return self._timer.isActive()

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.start(max(0, int(delay_ms)))

    def cancel(self) -> None:
        self._timer.stop()
        self._callback = None

    def _fire(self) -> None:
        callback = self._callback
        self._callback = None
        if callback is not None:
            callback()


class LiterateEditor(QPlainTextEdit):
    messageRequested = Signal(str)

    def __init__(
        self,
        parent=None,
        *,
        backend: ExecutionBackend | None = None,
        target: ExecutionTarget | None = None,
        settings_store: LiterateSettingsStore | None = None,
        language: str = "python",
    ):
        super().__init__(parent)
        self.setFont(QFont("Courier New", 11))
        self.setLineWrapMode(QPlainTextEdit.NoWrap)

        self._overlays: dict[int, str] = {}
        self._pending_change: tuple[int, int, int] | None = None
        self._applying_edit = False
        self._in_text_change = False
        self._seen_revision = int(self.document().revision())

        self.reveal_scheduler = QtDebounceScheduler(self)
        self.session = LiterateSession(
            self,
            overlays=self,
            scheduler=self.reveal_scheduler,
            backend=backend if backend is not None else InProcessInterpreter(),
            target=target,
            settings_store=settings_store,
            highlight=delegate_highlight,
            language=language,
        )
        self._highlighter = LiterateHighlighter(self.document(), self.session)

        self._text_change_timer = QTimer(self)
        self._text_change_timer.setSingleShot(True)
        self._text_change_timer.setInterval(0)
        self._text_change_timer.timeout.connect(self.flush_pending_changes)

        self.document().contentsChange.connect(self._on_contents_change)
        self.cursorPositionChanged.connect(self._on_cursor_position_changed)
        self._install_command_actions()

    # ---------- TextHost ----------

    def text(self) -> str:
        return self.toPlainText()

    def cursor_position(self) -> int:
        return int(self.textCursor().position())

    def apply_edit(self, edit: TextEdit) -> None:
        cursor = QTextCursor(self.document())
        if self._in_text_change:
            # auto-resize undoes together with the keystroke that caused it
            cursor.joinPreviousEditBlock()
        else:
            cursor.beginEditBlock()
        self._applying_edit = True
        try:
            cursor.setPosition(edit.start)
            cursor.setPosition(edit.end, QTextCursor.KeepAnchor)
            cursor.insertText(edit.text)
        finally:
            cursor.endEditBlock()
            self._applying_edit = False
            self._seen_revision = int(self.document().revision())

    def setPlainText(self, text: str) -> None:
        # loading a buffer is not an edit: no underline resize
        self._pending_change = None
        self._applying_edit = True
        try:
            super().setPlainText(text)
        finally:
            self._applying_edit = False
            self._seen_revision = int(self.document().revision())
        self.clear_overlays()

    def reannotate(self, start: int, end: int) -> None:
        doc = self.document()
        size = max(0, doc.characterCount() - 1)
        start = max(0, min(int(start), size))
        end = max(start, min(int(end), size))
        if start == 0 and end >= size:
            self._highlighter.rehighlight()
            return
        # neighbours too: their three-line context includes the range
        first = doc.findBlock(start)
        if first.previous().isValid():
            first = first.previous()
        last = doc.findBlock(end)
        if last.next().isValid():
            last = last.next()
        block = first
        while block.isValid():
            self._highlighter.rehighlightBlock(block)
            if block == last:
                break
            block = block.next()

    # ---------- OverlayRenderer ----------

    def show_overlay(self, anchor: int, text: str) -> None:
        anchor = int(anchor)
        if text:
            self._overlays[anchor] = str(text)
        else:
            self._overlays.pop(anchor, None)
        self.viewport().update()

    def clear_overlays(self) -> None:
        if not self._overlays:
            return
        self._overlays.clear()
        self.viewport().update()

    def overlays(self) -> dict[int, str]:
        return dict(self._overlays)

    # ---------- buffer notifications ----------

    def _on_contents_change(self, position: int, removed: int, added: int) -> None:
        if self._applying_edit:
            return
        revision = int(self.document().revision())
        if revision == self._seen_revision and removed == added:
            # format-only change from the highlighter
            return
        self._seen_revision = revision

        if self._pending_change is None:
            self._pending_change = (int(position), int(removed), int(added))
        else:
            p_start, p_removed, p_added = self._pending_change
            start = min(p_start, int(position))
            end = max(p_start + p_added, int(position) + int(added))
            self._pending_change = (start, p_removed + int(removed), end - start)
        self._text_change_timer.start()

    def flush_pending_changes(self) -> None:
        pending = self._pending_change
        self._pending_change = None
        if pending is None or self.session.closed:
            return
        position, removed, added = pending
        size = max(0, self.document().characterCount() - 1)
        position = max(0, min(position, size))
        self._in_text_change = True
        try:
            self.session.on_text_changed(position, removed, added)
        finally:
            self._in_text_change = False

    def _on_cursor_position_changed(self) -> None:
        if self.session.closed:
            return
        self.session.on_cursor_moved(self.cursor_position())

    # ---------- commands ----------

    def _run_command(self, command: Callable, *args):
        try:
            return command(*args)
        except NoSnippetFound as exc:
            logger.debug("Command aborted: %s", exc)
            self.messageRequested.emit(str(exc))
            return None

    def cycle_title(self):
        return self._run_command(self.session.cycle_title)

    def copy_snippet_to_target(self):
        return self._run_command(self.session.copy_snippet_to_target)

    def eval_snippet_inline(self, block: bool = False):
        return self._run_command(self.session.eval_snippet_inline, block)

    def toggle_quotes_markup(self):
        return self._run_command(self.session.toggle_quotes_markup)

    def toggle_title_markup(self):
        return self._run_command(self.session.toggle_title_markup)

    def hide_all_markup(self):
        return self._run_command(self.session.hide_all_markup)

    def _install_command_actions(self) -> None:
        handlers = {
            "cycle_title": self.cycle_title,
            "copy_snippet_to_target": self.copy_snippet_to_target,
            "eval_snippet_inline": lambda: self.eval_snippet_inline(False),
            "eval_block_inline": lambda: self.eval_snippet_inline(True),
            "toggle_quotes_markup": self.toggle_quotes_markup,
            "toggle_title_markup": self.toggle_title_markup,
            "hide_all_markup": self.hide_all_markup,
        }
        self.command_actions: dict[str, QAction] = {}
        for name, handler in handlers.items():
            action = QAction(name.replace("_", " ").capitalize(), self)
            action.setShortcut(QKeySequence(COMMAND_SHORTCUTS[name]))
            action.setShortcutContext(Qt.WidgetWithChildrenShortcut)
            action.triggered.connect(lambda _checked=False, fn=handler: fn())
            self.addAction(action)
            self.command_actions[name] = action

    def shutdown(self) -> None:
        self._text_change_timer.stop()
        self._pending_change = None
        self.session.close()

    # ---------- painting ----------

    def paintEvent(self, event):
        super().paintEvent(event)
        self._paint_output_overlays()

    def _paint_output_overlays(self) -> None:
        if not self._overlays:
            return
        doc = self.document()
        fm = self.fontMetrics()
        painter = QPainter(self.viewport())
        painter.setRenderHint(QPainter.Antialiasing, True)
        color = QColor(self.palette().color(QPalette.PlaceholderText))
        color.setAlpha(200)
        offset = self.contentOffset()

        for anchor, text in sorted(self._overlays.items()):
            block = doc.findBlock(anchor)
            if not block.isValid() or not block.isVisible():
                continue
            geometry = self.blockBoundingGeometry(block).translated(offset)
            if geometry.bottom() < 0 or geometry.top() > self.viewport().height():
                continue
            layout = block.layout()
            if layout is not None and layout.lineCount() > 0:
                last_line = layout.lineAt(layout.lineCount() - 1)
                text_w = int(last_line.naturalTextWidth())
                line_top = int(geometry.top() + last_line.y())
                line_h = int(last_line.height())
            else:
                text_w = int(fm.horizontalAdvance(block.text()))
                line_top = int(geometry.top())
                line_h = int(fm.height())

            lines = text.split("\n")
            x = int(geometry.left()) + text_w + int(fm.horizontalAdvance("  "))

            # Single-line output stays inline after the line's text.
            if len(lines) == 1:
                y = line_top + max(0, (line_h - fm.height()) // 2) + fm.ascent()
                max_w = max(8, self.viewport().width() - x - 8)
                painter.setPen(color)
                painter.drawText(x, y, fm.elidedText(f"=> {lines[0]}", Qt.TextElideMode.ElideRight, max_w))
                continue

            preview = list(lines[:_OVERLAY_MAX_LINES])
            if len(lines) > _OVERLAY_MAX_LINES:
                preview[-1] = f"{preview[-1]} ..."
            pad_x, pad_y = 6, 4
            row_h = int(fm.lineSpacing())
            x = int(geometry.left()) + int(fm.horizontalAdvance("    "))
            panel_w = min(
                max(100, self.viewport().width() - x - 8),
                max(int(fm.horizontalAdvance(line)) for line in preview) + pad_x * 2,
            )
            panel_rect = QRect(x, line_top + line_h + 2, panel_w, row_h * len(preview) + pad_y * 2)

            bg = QColor(self.palette().color(QPalette.Base))
            bg.setAlpha(224)
            border = QColor(self.palette().color(QPalette.Mid))
            border.setAlpha(200)
            painter.setPen(border)
            painter.setBrush(bg)
            painter.drawRoundedRect(panel_rect, 4, 4)

            painter.setPen(color)
            text_w = max(20, panel_w - pad_x * 2)
            for row, line in enumerate(preview):
                y = panel_rect.top() + pad_y + row * row_h + fm.ascent()
                painter.drawText(
                    panel_rect.left() + pad_x,
                    y,
                    fm.elidedText(line, Qt.TextElideMode.ElideRight, text_w),
                )
        painter.end()


__all__ = ["COMMAND_SHORTCUTS", "LiterateEditor", "QtDebounceScheduler"]
