"""Widen an edited range so multi-line constructs are re-annotated whole."""

from __future__ import annotations

import logging

from .grammar import LiterateGrammar, build_grammar
from .helpers import line_end, line_start, previous_line_start

logger = logging.getLogger(__name__)


def extend_region(
    text: str,
    start: int,
    end: int,
    *,
    grammar: LiterateGrammar | None = None,
) -> tuple[int, int, bool]:
    """Return ``(start, end, changed)`` aligned to whole title blocks.

    The start moves to its line start, and further up to the title line when
    the line above and the start line form a title block.  The end moves past
    the underline when its line belongs to a title block, otherwise to the end of
    its line.  The range never shrinks.
    """
    grammar = grammar or build_grammar()
    size = len(text)
    orig_start = max(0, min(int(start), size))
    orig_end = max(orig_start, min(int(end), size))

    new_start = line_start(text, orig_start)
    above = previous_line_start(text, new_start)
    if above is not None:
        block = grammar.match_title_block(text, above)
        if block is not None:
            new_start = block.start

    # An exclusive end sitting on a line start does not cover that line.
    if orig_end > orig_start and text[orig_end - 1] == "\n":
        end_line = line_start(text, orig_end - 1)
    else:
        end_line = line_start(text, orig_end)
    block = grammar.title_block_at(text, end_line)
    if block is not None:
        new_end = block.end
    else:
        new_end = line_end(text, end_line)

    new_start = min(new_start, orig_start)
    new_end = max(new_end, orig_end)
    changed = (new_start, new_end) != (orig_start, orig_end)
    if changed:
        logger.debug("Extended region [%d, %d) -> [%d, %d)", orig_start, orig_end, new_start, new_end)
    return new_start, new_end, changed


def extend_region_to_fixed_point(
    text: str,
    start: int,
    end: int,
    *,
    grammar: LiterateGrammar | None = None,
    max_rounds: int = 8,
) -> tuple[int, int]:
    for _ in range(max(1, int(max_rounds))):
        start, end, changed = extend_region(text, start, end, grammar=grammar)
        if not changed:
            break
    return start, end


__all__ = ["extend_region", "extend_region_to_fixed_point"]
