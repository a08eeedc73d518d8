"""Title editing: cycle underline styles and keep underlines sized to titles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .grammar import COMMENT_CHAR, LiterateGrammar, TitleBlock, build_grammar
from .helpers import display_width, line_end

SCAFFOLD_TITLE = "Title"


@dataclass(frozen=True, slots=True)
class TextEdit:
    start: int
    end: int
    text: str

    def apply(self, source: str) -> str:
        return source[: self.start] + self.text + source[self.end :]


def apply_edits(source: str, edits: Iterable[TextEdit]) -> str:
    # right-to-left so earlier offsets stay valid
    for edit in sorted(edits, key=lambda e: e.start, reverse=True):
        source = edit.apply(source)
    return source


def _set_underline(block: TitleBlock, char: str) -> TextEdit:
    u_start, u_end = block.underline_span
    return TextEdit(u_start, u_end, char * block.title_width)


def cycle_title(text: str, pos: int, *, grammar: LiterateGrammar | None = None) -> TextEdit:
    """Next title state for the line at ``pos``.

    - title whose underline length drifted: underline resized, style kept
    - title at style ``n``: underline switched to style ``n + 1``
    - title at the last style: underline line removed
    - title text without underline: underline of the first style added
    - anything else: ``# Title`` scaffold inserted at ``pos``
    """
    grammar = grammar or build_grammar()
    styles = grammar.title_styles
    block = grammar.title_block_at(text, pos)
    if block is not None:
        if not block.synchronized:
            return _set_underline(block, block.underline_char)
        index = grammar.style_index(block.underline_char)
        if index + 1 < len(styles):
            return _set_underline(block, styles[index + 1])
        title_end = line_end(text, block.start)
        return TextEdit(title_end, line_end(text, block.underline_span[0]), "")

    m = grammar.match_title_line(text, pos)
    if m is not None:
        underline = styles[0] * display_width(m.group("title"))
        end = line_end(text, m.start())
        return TextEdit(end, end, f"\n{m.group('marker')}{underline}")

    marker = f"{COMMENT_CHAR} "
    scaffold = f"{marker}{SCAFFOLD_TITLE}\n{marker}{styles[0] * display_width(SCAFFOLD_TITLE)}"
    return TextEdit(pos, pos, scaffold)


def resize_underline(text: str, pos: int, *, grammar: LiterateGrammar | None = None) -> TextEdit | None:
    """Underline resize for the title owning the line at ``pos``, if needed."""
    grammar = grammar or build_grammar()
    block = grammar.title_block_at(text, pos)
    if block is None or block.level is None or block.synchronized:
        return None
    return _set_underline(block, block.underline_char)


__all__ = [
    "SCAFFOLD_TITLE",
    "TextEdit",
    "apply_edits",
    "cycle_title",
    "resize_underline",
]
