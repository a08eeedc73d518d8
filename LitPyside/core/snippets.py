"""Rebuild executable snippets from the doctest lines shown on screen."""

from __future__ import annotations

from dataclasses import dataclass

from .grammar import DoctestLine, LiterateGrammar, build_grammar
from .helpers import next_line_start, previous_line_start


class NoSnippetFound(LookupError):
    """Raised when no doctest prompt is found at the requested position."""

    def __init__(self, position: int):
        super().__init__(f"No doctest snippet at position {position}.")
        self.position = int(position)


@dataclass(frozen=True, slots=True)
class Snippet:
    lines: tuple[DoctestLine, ...]

    @property
    def command(self) -> str:
        return "\n".join(line.payload for line in self.lines)

    @property
    def start(self) -> int:
        return self.lines[0].position

    @property
    def end(self) -> int:
        return self.lines[-1].end

    @property
    def last_line_position(self) -> int:
        return self.lines[-1].position


@dataclass(frozen=True, slots=True)
class SnippetBlock:
    snippets: tuple[Snippet, ...]

    @property
    def commands(self) -> list[str]:
        return [snippet.command for snippet in self.snippets]

    @property
    def last_line_position(self) -> int:
        return self.snippets[-1].last_line_position


def _collect_forward(text: str, first: DoctestLine, grammar: LiterateGrammar) -> Snippet:
    lines = [first]
    pos = next_line_start(text, first.position)
    while pos is not None:
        line = grammar.parse_doctest_line(text, pos)
        if line is None or not line.is_continuation:
            break
        lines.append(line)
        pos = next_line_start(text, pos)
    return Snippet(tuple(lines))


def read_snippet(text: str, pos: int, *, grammar: LiterateGrammar | None = None) -> Snippet:
    """Read the snippet whose prompt or continuation line holds ``pos``.

    Continuation lines are followed upward to their ``>>>`` line, then the
    snippet runs down until the first line that is not a continuation.
    """
    grammar = grammar or build_grammar()
    line = grammar.parse_doctest_line(text, pos)
    if line is None:
        raise NoSnippetFound(pos)

    while line.is_continuation:
        above = previous_line_start(text, line.position)
        if above is None:
            break
        previous = grammar.parse_doctest_line(text, above)
        if previous is None:
            # orphan continuation: it opens its own snippet
            break
        line = previous
    return _collect_forward(text, line, grammar)


def read_snippet_block(text: str, pos: int, *, grammar: LiterateGrammar | None = None) -> SnippetBlock:
    """Read every snippet of the contiguous doctest run around ``pos``."""
    grammar = grammar or build_grammar()
    line = grammar.parse_doctest_line(text, pos)
    if line is None:
        raise NoSnippetFound(pos)

    top = line
    while True:
        above = previous_line_start(text, top.position)
        if above is None:
            break
        previous = grammar.parse_doctest_line(text, above)
        if previous is None:
            break
        top = previous

    snippets: list[Snippet] = []
    current: DoctestLine | None = top
    while current is not None:
        snippet = _collect_forward(text, current, grammar)
        snippets.append(snippet)
        following = next_line_start(text, snippet.last_line_position)
        current = None if following is None else grammar.parse_doctest_line(text, following)
    return SnippetBlock(tuple(snippets))


__all__ = [
    "NoSnippetFound",
    "Snippet",
    "SnippetBlock",
    "read_snippet",
    "read_snippet_block",
]
