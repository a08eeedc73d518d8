"""Pattern grammar for literate sources: titles, doc comments, doctests, quotes.

All recognizers are stateless: they read the text they are given, starting
at the position they are given, and never look at anything else.  Patterns
are line oriented (``re.MULTILINE``) and never match across more lines than
the construct owns.

Supports::

    # Section title            Section title         ## Prose comment
    # =============            -------------

    # >>> for x in items:       ``double quoted``     `single quoted`
    # ...     print(x)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable, Iterator

from .helpers import display_width, line_end, line_start, previous_line_start

COMMENT_CHAR = "#"
LOUD_CHAR = "!"
DEFAULT_TITLE_STYLES: tuple[str, ...] = ("=", "-", "~")

PRIMARY_PROMPT = ">>>"
CONTINUATION_PROMPT = "..."


class PromptKind(Enum):
    PRIMARY = PRIMARY_PROMPT
    CONTINUATION = CONTINUATION_PROMPT


@dataclass(frozen=True, slots=True)
class TitleBlock:
    start: int
    end: int
    marker: str
    title: str
    underline_marker: str
    underline_char: str
    underline_length: int
    level: int | None
    marker_span: tuple[int, int]
    title_span: tuple[int, int]
    underline_marker_span: tuple[int, int]
    underline_span: tuple[int, int]

    @property
    def title_width(self) -> int:
        return display_width(self.title)

    @property
    def synchronized(self) -> bool:
        return self.underline_length == self.title_width


@dataclass(frozen=True, slots=True)
class DocComment:
    start: int
    end: int
    marker_span: tuple[int, int]


@dataclass(frozen=True, slots=True)
class DoctestLine:
    kind: PromptKind
    prefix: str
    payload: str
    position: int
    end: int
    prompt_span: tuple[int, int]
    payload_span: tuple[int, int]

    @property
    def is_continuation(self) -> bool:
        return self.kind is PromptKind.CONTINUATION


@dataclass(frozen=True, slots=True)
class QuotedSpan:
    width: int  # 1 = `single`, 2 = ``double``
    content: str
    start: int
    end: int

    @property
    def content_span(self) -> tuple[int, int]:
        return self.start + self.width, self.end - self.width


def _char_class(chars: Iterable[str]) -> str:
    return "".join(re.escape(ch) for ch in chars)


class LiterateGrammar:
    """Compiled recognizers for one ordered list of title styles."""

    def __init__(
        self,
        title_styles: Iterable[str] = DEFAULT_TITLE_STYLES,
        *,
        comment_char: str = COMMENT_CHAR,
        loud_char: str = LOUD_CHAR,
    ):
        styles = tuple(str(ch) for ch in title_styles)
        if not styles:
            raise ValueError("At least one title style character is required.")
        for ch in styles:
            if len(ch) != 1 or ch.isspace() or ch.isalnum():
                raise ValueError(f"Invalid title style character: {ch!r}")
            if ch in (comment_char, "`", ">", "."):
                raise ValueError(f"Title style character {ch!r} collides with other markup.")
        if len(set(styles)) != len(styles):
            raise ValueError(f"Duplicate title style characters: {styles!r}")

        self.title_styles = styles
        self.comment_char = comment_char
        self.loud_char = loud_char

        c = re.escape(comment_char)
        loud = re.escape(loud_char)
        underline_chars = _char_class(styles)

        # Comment marker: indentation, markers, an optional loud indicator, blanks.
        self.comment_marker = rf"[ \t]*(?:{c}+{loud}?)?[ \t]*"

        # A title is never itself an underline run.
        title_line = (
            rf"(?P<marker>{self.comment_marker})"
            rf"(?!(?P<tchar>[{underline_chars}])(?P=tchar)*[ \t]*$)"
            rf"(?P<title>[^{c}\s](?:[^\n]*[^\s])?)[ \t]*"
        )
        underline_line = (
            rf"(?P<umarker>{self.comment_marker})"
            rf"(?P<underline>(?P<uchar>[{underline_chars}])(?P=uchar)*)[ \t]*"
        )

        self.re_title_line = re.compile(rf"^{title_line}$", re.M)
        self.re_underline_line = re.compile(rf"^{underline_line}$", re.M)
        self.re_title_block = re.compile(rf"^{title_line}\n{underline_line}$\n?", re.M)
        self.re_doc_comment = re.compile(
            rf"^(?P<marker>[ \t]*{c}{{2}}(?!{c}){loud}?[ \t]+)(?P<body>[^\n]*)$", re.M
        )
        self.re_doctest = re.compile(
            rf"^(?P<prefix>[{c} \t]*)(?P<prompt>>>>|\.\.\.) ?(?P<payload>[^\n]*)$", re.M
        )
        self.re_single_quote = re.compile(r"(?<!`)`(?P<content>[^`\s](?:[^`\n]*[^`\s])?)`(?!`)")
        self.re_double_quote = re.compile(r"(?<!`)``(?P<content>[^`\n]+)``(?!`)")

    # ---------- styles ----------

    def style_index(self, char: str) -> int | None:
        try:
            return self.title_styles.index(char)
        except ValueError:
            return None

    def title_level(self, char: str) -> int | None:
        index = self.style_index(char)
        return None if index is None else index + 1

    # ---------- titles ----------

    def _title_from_match(self, m: re.Match) -> TitleBlock:
        underline = m.group("underline")
        uchar = m.group("uchar")
        return TitleBlock(
            start=m.start(),
            end=m.end(),
            marker=m.group("marker"),
            title=m.group("title"),
            underline_marker=m.group("umarker"),
            underline_char=uchar,
            underline_length=len(underline),
            level=self.title_level(uchar),
            marker_span=m.span("marker"),
            title_span=m.span("title"),
            underline_marker_span=m.span("umarker"),
            underline_span=m.span("underline"),
        )

    def match_title_block(self, text: str, pos: int) -> TitleBlock | None:
        """Title block whose first line starts at the line containing ``pos``."""
        m = self.re_title_block.match(text, line_start(text, pos))
        return self._title_from_match(m) if m else None

    def title_block_at(self, text: str, pos: int) -> TitleBlock | None:
        """Title block owning the line at ``pos``, as title line or underline."""
        block = self.match_title_block(text, pos)
        if block is not None:
            return block
        above = previous_line_start(text, pos)
        if above is None:
            return None
        return self.match_title_block(text, above)

    def iter_title_blocks(self, text: str, start: int = 0, end: int | None = None) -> Iterator[TitleBlock]:
        stop = len(text) if end is None else end
        for m in self.re_title_block.finditer(text, start, stop):
            yield self._title_from_match(m)

    def match_title_line(self, text: str, pos: int) -> re.Match | None:
        start = line_start(text, pos)
        return self.re_title_line.match(text, start, line_end(text, start))

    # ---------- doc comments ----------

    def iter_doc_comments(self, text: str, start: int = 0, end: int | None = None) -> Iterator[DocComment]:
        stop = len(text) if end is None else end
        for m in self.re_doc_comment.finditer(text, start, stop):
            yield DocComment(start=m.start(), end=m.end(), marker_span=m.span("marker"))

    # ---------- doctests ----------

    def _doctest_from_match(self, m: re.Match) -> DoctestLine:
        return DoctestLine(
            kind=PromptKind(m.group("prompt")),
            prefix=m.group("prefix"),
            payload=m.group("payload"),
            position=m.start(),
            end=m.end(),
            prompt_span=m.span("prompt"),
            payload_span=m.span("payload"),
        )

    def parse_doctest_line(self, text: str, pos: int) -> DoctestLine | None:
        start = line_start(text, pos)
        m = self.re_doctest.match(text, start, line_end(text, start))
        return self._doctest_from_match(m) if m else None

    def iter_doctest_lines(self, text: str, start: int = 0, end: int | None = None) -> Iterator[DoctestLine]:
        stop = len(text) if end is None else end
        for m in self.re_doctest.finditer(text, start, stop):
            yield self._doctest_from_match(m)

    # ---------- quotes ----------

    def iter_quoted_spans(self, text: str, start: int = 0, end: int | None = None) -> Iterator[QuotedSpan]:
        """Quoted spans in source order; double quotes win over single quotes."""
        stop = len(text) if end is None else end
        spans = [
            QuotedSpan(width=2, content=m.group("content"), start=m.start(), end=m.end())
            for m in self.re_double_quote.finditer(text, start, stop)
        ]
        taken = [(s.start, s.end) for s in spans]
        for m in self.re_single_quote.finditer(text, start, stop):
            if any(m.start() < t_end and t_start < m.end() for t_start, t_end in taken):
                continue
            spans.append(QuotedSpan(width=1, content=m.group("content"), start=m.start(), end=m.end()))
        spans.sort(key=lambda s: s.start)
        yield from spans


@lru_cache(maxsize=16)
def build_grammar(title_styles: tuple[str, ...] = DEFAULT_TITLE_STYLES) -> LiterateGrammar:
    return LiterateGrammar(title_styles)


def format_title_block(
    title: str,
    style_index: int,
    *,
    marker: str = "",
    grammar: LiterateGrammar | None = None,
) -> str:
    grammar = grammar or build_grammar()
    char = grammar.title_styles[style_index]
    return f"{marker}{title}\n{marker}{char * display_width(title)}"


__all__ = [
    "COMMENT_CHAR",
    "CONTINUATION_PROMPT",
    "DEFAULT_TITLE_STYLES",
    "DocComment",
    "DoctestLine",
    "LOUD_CHAR",
    "LiterateGrammar",
    "PRIMARY_PROMPT",
    "PromptKind",
    "QuotedSpan",
    "TitleBlock",
    "build_grammar",
    "format_title_block",
]
