"""Code highlighters and the sub-range delegate used for embedded code."""

from __future__ import annotations

import re

from PySide6.QtGui import QColor, QFont, QSyntaxHighlighter, QTextCharFormat

# ---------------- Syntax Highlighters ----------------


def _char_format(color: str, *, bold: bool = False, italic: bool = False) -> QTextCharFormat:
    fmt = QTextCharFormat()
    fmt.setForeground(QColor(color))
    if bold:
        fmt.setFontWeight(QFont.Bold)
    if italic:
        fmt.setFontItalic(True)
    return fmt


class PythonHighlighter(QSyntaxHighlighter):
    """
    Python highlighter for literate sources:
    - keywords, self/cls, builtins, exceptions
    - decorators and def/class names
    - numbers
    - single-line and triple-quoted strings (carried across blocks)
    - comments with TODO/FIXME/NOTE tags
    """

    STATE_NORMAL = 0
    STATE_TRIPLE_SINGLE = 1
    STATE_TRIPLE_DOUBLE = 2

    KEYWORDS = (
        "False", "None", "True", "and", "as", "assert", "async", "await", "break",
        "class", "continue", "def", "del", "elif", "else", "except", "finally",
        "for", "from", "global", "if", "import", "in", "is", "lambda", "match",
        "case", "nonlocal", "not", "or", "pass", "raise", "return", "try", "while",
        "with", "yield",
    )
    BUILTINS = (
        "abs", "all", "any", "bool", "bytes", "callable", "dict", "dir", "enumerate",
        "filter", "float", "format", "getattr", "hasattr", "int", "isinstance", "iter",
        "len", "list", "map", "max", "min", "next", "object", "open", "print", "range",
        "repr", "reversed", "set", "setattr", "sorted", "str", "sum", "super", "tuple",
        "type", "zip",
    )
    EXCEPTIONS = (
        "BaseException", "Exception", "AssertionError", "AttributeError", "ImportError",
        "IndexError", "KeyError", "LookupError", "NameError", "NotImplementedError",
        "OSError", "RuntimeError", "StopIteration", "SyntaxError", "TypeError",
        "ValueError", "ZeroDivisionError",
    )

    def __init__(self, parent=None):
        super().__init__(parent)

        # ---------- formats ----------
        self.fmt_kw = _char_format("#569Cff", bold=True)
        self.fmt_soft_kw = _char_format("#4FC1FF", bold=True)
        self.fmt_builtin = _char_format("#4EC9B0")
        self.fmt_exception = _char_format("#DCDCAA")
        self.fmt_decorator = _char_format("#C586C0")
        self.fmt_defclass_name = _char_format("#DCDCAA", bold=True)
        self.fmt_string = _char_format("#CE9178")
        self.fmt_comment = _char_format("#6A9955", italic=True)
        self.fmt_comment_tag = _char_format("#FFB86C", bold=True)
        self.fmt_number = _char_format("#B5CEA8")

        # ---------- regex sets ----------
        def words(names) -> re.Pattern:
            return re.compile(r"\b(?:" + "|".join(names) + r")\b")

        self.rules: list[tuple[re.Pattern, QTextCharFormat]] = [
            (words(self.KEYWORDS), self.fmt_kw),
            (words(("self", "cls")), self.fmt_soft_kw),
            (words(self.BUILTINS), self.fmt_builtin),
            (words(self.EXCEPTIONS), self.fmt_exception),
            (re.compile(r"\b\d+(?:\.\d*)?(?:[eE][+-]?\d+)?[jJ]?\b|\b0[xXoObB][0-9a-fA-F_]+\b"), self.fmt_number),
            (re.compile(r"(?<!\w)@[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*"), self.fmt_decorator),
        ]
        self.defclass_pat = re.compile(r"\b(?:def|class)\s+([A-Za-z_]\w*)")
        self.string_pat = re.compile(r"""[rRbBuUfF]{,2}(?:'(?:[^'\\\n]|\\.)*'|"(?:[^"\\\n]|\\.)*")""")
        self.triple_start = re.compile(r"""[rRbBuUfF]{,2}('''|\"\"\")""")
        self.comment_tag_pat = re.compile(r"\b(TODO|FIXME|NOTE|HACK|BUG|XXX)\b")

    # ---------- helpers ----------

    def _apply_basic_rules(self, text: str, offset: int) -> None:
        for pat, fmt in self.rules:
            for m in pat.finditer(text):
                self.setFormat(offset + m.start(), m.end() - m.start(), fmt)
        for m in self.defclass_pat.finditer(text):
            ns, ne = m.span(1)
            self.setFormat(offset + ns, ne - ns, self.fmt_defclass_name)

    def _string_spans(self, text: str) -> list[tuple[int, int]]:
        return [m.span() for m in self.string_pat.finditer(text)]

    def _highlight_comment_with_tags(self, text: str, offset: int, strings: list[tuple[int, int]]) -> None:
        cs = text.find("#")
        while cs >= 0 and any(s <= cs < e for s, e in strings):
            cs = text.find("#", cs + 1)
        if cs < 0:
            return
        ce = len(text)
        self.setFormat(offset + cs, ce - cs, self.fmt_comment)
        for tm in self.comment_tag_pat.finditer(text, cs, ce):
            self.setFormat(offset + tm.start(), tm.end() - tm.start(), self.fmt_comment_tag)

    # ---------- main ----------

    def highlightBlock(self, text: str):
        self.setCurrentBlockState(self.STATE_NORMAL)
        prev = self.previousBlockState()
        offset = 0

        # Continue a triple-quoted string opened in an earlier block
        if prev in (self.STATE_TRIPLE_SINGLE, self.STATE_TRIPLE_DOUBLE):
            closing = "'''" if prev == self.STATE_TRIPLE_SINGLE else '"""'
            end = text.find(closing)
            if end < 0:
                self.setFormat(0, len(text), self.fmt_string)
                self.setCurrentBlockState(prev)
                return
            offset = end + len(closing)
            self.setFormat(0, offset, self.fmt_string)

        segment = text[offset:]
        self._apply_basic_rules(segment, offset)
        strings = self._string_spans(segment)
        for s, e in strings:
            self.setFormat(offset + s, e - s, self.fmt_string)

        # Triple strings that start in this block
        i = 0
        while True:
            m = self.triple_start.search(segment, i)
            if m is None:
                break
            quote = m.group(1)
            close = segment.find(quote, m.end())
            if close < 0:
                self.setFormat(offset + m.start(), len(segment) - m.start(), self.fmt_string)
                self.setCurrentBlockState(
                    self.STATE_TRIPLE_SINGLE if quote == "'''" else self.STATE_TRIPLE_DOUBLE
                )
                segment = segment[: m.start()]
                break
            end = close + len(quote)
            self.setFormat(offset + m.start(), end - m.start(), self.fmt_string)
            strings.append((m.start(), end))
            i = end

        # Comments + tags (last pass)
        self._highlight_comment_with_tags(segment, offset, strings)


LANGUAGE_HIGHLIGHTER_MAP: dict[str, type[QSyntaxHighlighter]] = {
    "python": PythonHighlighter,
    "python3": PythonHighlighter,
    "py": PythonHighlighter,
    "pycon": PythonHighlighter,
}


def delegate_highlight(
    text: str,
    language: str,
    previous_state: int = -1,
) -> list[tuple[int, int, QTextCharFormat]]:
    """Run a language highlighter over ``text`` alone and collect its formats.

    A fresh delegate is built for every call so the function stays usable
    while another highlighter is in the middle of ``highlightBlock``.
    Unknown languages yield no formats.
    """
    delegate_cls = LANGUAGE_HIGHLIGHTER_MAP.get(str(language or "").strip().lower())
    if delegate_cls is None:
        return []

    delegate = delegate_cls(None)
    applied_formats: list[tuple[int, int, QTextCharFormat]] = []

    def fake_set_format(start: int, count: int, fmt: QTextCharFormat):
        applied_formats.append((start, count, QTextCharFormat(fmt)))

    # route the delegate's output here instead of into a document
    delegate.setFormat = fake_set_format
    delegate.previousBlockState = lambda: previous_state
    delegate.setCurrentBlockState = lambda _state: None
    delegate.highlightBlock(text)
    return applied_formats


__all__ = [
    "LANGUAGE_HIGHLIGHTER_MAP",
    "PythonHighlighter",
    "delegate_highlight",
]
