"""QSyntaxHighlighter that renders literate directives over Python code."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtGui import QBrush, QColor, QFont, QTextCharFormat

from LitPyside.core.annotator import StyleTag, VisualDirective

from .syntax_highlighters import PythonHighlighter

if TYPE_CHECKING:
    from LitPyside.core.session import LiterateSession


HIDDEN_POINT_SIZE = 1.0


class LiterateHighlighter(PythonHighlighter):
    """
    Python highlighting first, literate directives on top:
    - titles in three escalating styles, other underlines as prose
    - doc comments as prose
    - doctest prompts and payloads (payloads re-highlighted as code)
    - single and double quoted spans
    - hidden markup drawn transparent at a 1pt font
    """

    def __init__(self, parent=None, session: "LiterateSession | None" = None):
        super().__init__(parent)
        self.session = session

        # ---------- formats ----------
        self.fmt_title_1 = QTextCharFormat()
        self.fmt_title_1.setForeground(QColor("#4FC1FF"))
        self.fmt_title_1.setFontWeight(QFont.Bold)
        self.fmt_title_1.setFontPointSize(15)

        self.fmt_title_2 = QTextCharFormat()
        self.fmt_title_2.setForeground(QColor("#61AFEF"))
        self.fmt_title_2.setFontWeight(QFont.Bold)
        self.fmt_title_2.setFontPointSize(13)

        self.fmt_title_3 = QTextCharFormat()
        self.fmt_title_3.setForeground(QColor("#C586C0"))
        self.fmt_title_3.setFontWeight(QFont.Bold)

        self.fmt_prose = QTextCharFormat()
        self.fmt_prose.setForeground(QColor("#D4D4D4"))
        self.fmt_prose.setFontFamily("sans-serif")

        self.fmt_markup = QTextCharFormat()
        self.fmt_markup.setForeground(QColor("#808080"))

        self.fmt_doctest_prompt = QTextCharFormat()
        self.fmt_doctest_prompt.setForeground(QColor("#569CD6"))
        self.fmt_doctest_prompt.setFontWeight(QFont.Bold)

        self.fmt_doctest_code = QTextCharFormat()
        self.fmt_doctest_code.setForeground(QColor("#DCDCAA"))
        self.fmt_doctest_code.setBackground(QColor("#1E2A33"))
        self.fmt_doctest_code.setFontFamily("monospace")

        self.fmt_quote_delimiter = QTextCharFormat()
        self.fmt_quote_delimiter.setForeground(QColor("#808080"))

        self.fmt_quote_single = QTextCharFormat()
        self.fmt_quote_single.setForeground(QColor("#D7BA7D"))
        self.fmt_quote_single.setFontItalic(True)

        self.fmt_quote_double = QTextCharFormat()
        self.fmt_quote_double.setForeground(QColor("#D7BA7D"))
        self.fmt_quote_double.setBackground(QColor("#2A2A2A"))
        self.fmt_quote_double.setFontFamily("monospace")

        self.fmt_hidden = QTextCharFormat()
        self.fmt_hidden.setForeground(QBrush(QColor(0, 0, 0, 0)))  # fully transparent
        self.fmt_hidden.setFontPointSize(HIDDEN_POINT_SIZE)

        # resolved when directives are emitted, never looked up by name
        self.style_formats: dict[StyleTag, QTextCharFormat] = {
            StyleTag.TITLE_1: self.fmt_title_1,
            StyleTag.TITLE_2: self.fmt_title_2,
            StyleTag.TITLE_3: self.fmt_title_3,
            StyleTag.PROSE: self.fmt_prose,
            StyleTag.MARKUP: self.fmt_markup,
            StyleTag.DOCTEST_PROMPT: self.fmt_doctest_prompt,
            StyleTag.DOCTEST_CODE: self.fmt_doctest_code,
            StyleTag.QUOTE_DELIMITER: self.fmt_quote_delimiter,
            StyleTag.QUOTE_SINGLE: self.fmt_quote_single,
            StyleTag.QUOTE_DOUBLE: self.fmt_quote_double,
        }

    # ---------- helpers ----------

    def format_for(self, directive: VisualDirective, base: QTextCharFormat | None = None) -> QTextCharFormat:
        if directive.hidden:
            return QTextCharFormat(self.fmt_hidden)
        if directive.style is StyleTag.EMBEDDED:
            fmt = QTextCharFormat(base) if base is not None else QTextCharFormat()
            if isinstance(directive.payload, QTextCharFormat):
                fmt.merge(directive.payload)
            return fmt
        fmt = QTextCharFormat(self.style_formats[directive.style])
        if directive.ruled:
            fmt.setFontUnderline(True)
            fmt.setUnderlineColor(QColor("#808080"))
        return fmt

    def _context_window(self, text: str) -> tuple[str, int, int]:
        """Previous, current and next line joined, with the window's document
        position and the current line's offset inside it."""
        block = self.currentBlock()
        window = text
        window_start = block.position()
        line_offset = 0
        previous = block.previous()
        if previous.isValid():
            window = f"{previous.text()}\n{window}"
            window_start = previous.position()
            line_offset = len(previous.text()) + 1
        following = block.next()
        if following.isValid():
            window = f"{window}\n{following.text()}"
        return window, window_start, line_offset

    # ---------- main ----------

    def highlightBlock(self, text: str):
        super().highlightBlock(text)
        session = getattr(self, "session", None)
        if session is None or session.closed:
            return

        window, window_start, line_offset = self._context_window(text)
        line_end = line_offset + len(text)
        for directive in session.annotate_text(window, offset=window_start):
            start = max(directive.start, line_offset)
            end = min(directive.end, line_end)
            if end <= start:
                continue
            local = start - line_offset
            fmt = self.format_for(directive, self.format(local))
            self.setFormat(local, end - start, fmt)


__all__ = ["HIDDEN_POINT_SIZE", "LiterateHighlighter"]
