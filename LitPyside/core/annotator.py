"""Turn grammar matches into visual directives for the rendering layer.

The annotator is pure: the same text, range, settings and reveal window give
the same directives.  Later directives win where they overlap, so the order
is doc comments, titles, doctests, then quoted spans.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Iterator

from .grammar import LiterateGrammar, build_grammar
from .settings import LiterateSettings

# (text, language) -> [(start, length, opaque style), ...] relative to text
EmbeddedHighlighter = Callable[[str, str], Iterable[tuple[int, int, Any]]]


class StyleTag(Enum):
    TITLE_1 = "title-1"
    TITLE_2 = "title-2"
    TITLE_3 = "title-3"
    PROSE = "prose"
    MARKUP = "markup"
    DOCTEST_PROMPT = "doctest-prompt"
    DOCTEST_CODE = "doctest-code"
    QUOTE_DELIMITER = "quote-delimiter"
    QUOTE_SINGLE = "quote-single"
    QUOTE_DOUBLE = "quote-double"
    EMBEDDED = "embedded"


TITLE_STYLE_BY_INDEX: tuple[StyleTag, ...] = (StyleTag.TITLE_1, StyleTag.TITLE_2, StyleTag.TITLE_3)


@dataclass(frozen=True, slots=True)
class VisualDirective:
    start: int
    end: int
    style: StyleTag
    hidden: bool = False
    ruled: bool = False  # thin rule under the span, stands in for a hidden underline
    payload: Any = None  # embedded highlighter style for StyleTag.EMBEDDED

    @property
    def length(self) -> int:
        return self.end - self.start


def title_style(index: int | None) -> StyleTag:
    if index is None or not 0 <= index < len(TITLE_STYLE_BY_INDEX):
        return StyleTag.PROSE
    return TITLE_STYLE_BY_INDEX[index]


class Annotator:
    def __init__(
        self,
        *,
        highlight: EmbeddedHighlighter | None = None,
        language: str = "python",
    ):
        self.highlight = highlight
        self.language = language

    def _hidden(self, hide: bool, start: int, end: int, reveal: tuple[int, int] | None) -> bool:
        if not hide:
            return False
        if reveal is not None and reveal[0] <= start and end <= reveal[1]:
            return False
        return True

    @staticmethod
    def _marker_span(text: str, span: tuple[int, int]) -> tuple[int, int] | None:
        start, end = span
        while start < end and text[start] in " \t":
            start += 1
        return (start, end) if end > start else None

    def _embedded(self, text: str, start: int, end: int) -> Iterator[VisualDirective]:
        if self.highlight is None or end <= start:
            return
        for rel_start, length, payload in self.highlight(text[start:end], self.language):
            s = start + max(0, int(rel_start))
            e = min(end, s + max(0, int(length)))
            if e > s:
                yield VisualDirective(s, e, StyleTag.EMBEDDED, payload=payload)

    def iter_directives(
        self,
        text: str,
        start: int = 0,
        end: int | None = None,
        *,
        settings: LiterateSettings | None = None,
        reveal: tuple[int, int] | None = None,
    ) -> Iterator[VisualDirective]:
        settings = settings or LiterateSettings()
        grammar: LiterateGrammar = build_grammar(tuple(settings.title_styles))
        stop = len(text) if end is None else min(int(end), len(text))
        hide_titles = settings.hide_title_markup
        hide_quotes = settings.hide_quotes

        for doc in grammar.iter_doc_comments(text, start, stop):
            yield VisualDirective(doc.start, doc.end, StyleTag.PROSE)
            marker = self._marker_span(text, doc.marker_span)
            if marker is not None:
                m_start, m_end = marker
                hidden = self._hidden(hide_titles, m_start, m_end, reveal)
                yield VisualDirective(m_start, m_end, StyleTag.MARKUP, hidden=hidden)

        for block in grammar.iter_title_blocks(text, start, stop):
            hidden = self._hidden(hide_titles, block.start, block.end, reveal)
            for span in (block.marker_span, block.underline_marker_span):
                marker = self._marker_span(text, span)
                if marker is not None:
                    m_start, m_end = marker
                    yield VisualDirective(m_start, m_end, StyleTag.MARKUP, hidden=hidden)
            t_start, t_end = block.title_span
            yield VisualDirective(
                t_start,
                t_end,
                title_style(grammar.style_index(block.underline_char)),
                ruled=hidden,
            )
            u_start, u_end = block.underline_span
            yield VisualDirective(u_start, u_end, StyleTag.MARKUP, hidden=hidden)

        doctest_lines: list[tuple[int, int]] = []
        for line in grammar.iter_doctest_lines(text, start, stop):
            doctest_lines.append((line.position, line.end))
            p_start, p_end = line.prompt_span
            yield VisualDirective(p_start, p_end, StyleTag.DOCTEST_PROMPT)
            c_start, c_end = line.payload_span
            if c_end > c_start:
                yield VisualDirective(c_start, c_end, StyleTag.DOCTEST_CODE)
                yield from self._embedded(text, c_start, c_end)

        for span in grammar.iter_quoted_spans(text, start, stop):
            if any(l_start <= span.start < l_end for l_start, l_end in doctest_lines):
                continue
            c_start, c_end = span.content_span
            hidden = self._hidden(hide_quotes, span.start, span.end, reveal)
            yield VisualDirective(span.start, c_start, StyleTag.QUOTE_DELIMITER, hidden=hidden)
            if span.width == 2:
                yield VisualDirective(c_start, c_end, StyleTag.QUOTE_DOUBLE)
                yield from self._embedded(text, c_start, c_end)
            else:
                yield VisualDirective(c_start, c_end, StyleTag.QUOTE_SINGLE)
            yield VisualDirective(c_end, span.end, StyleTag.QUOTE_DELIMITER, hidden=hidden)

    def annotate(
        self,
        text: str,
        start: int = 0,
        end: int | None = None,
        *,
        settings: LiterateSettings | None = None,
        reveal: tuple[int, int] | None = None,
    ) -> list[VisualDirective]:
        return list(self.iter_directives(text, start, end, settings=settings, reveal=reveal))


__all__ = [
    "Annotator",
    "EmbeddedHighlighter",
    "StyleTag",
    "TITLE_STYLE_BY_INDEX",
    "VisualDirective",
    "title_style",
]
