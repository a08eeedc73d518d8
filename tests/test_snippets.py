import pytest

from LitPyside.core.snippets import NoSnippetFound, read_snippet, read_snippet_block


def test_two_primary_lines_are_two_snippets() -> None:
    text = "# >>> a = 1\n# >>> b = 2\n"
    assert read_snippet(text, 0).command == "a = 1"
    assert read_snippet(text, 14).command == "b = 2"
    assert read_snippet_block(text, 0).commands == ["a = 1", "b = 2"]
    assert read_snippet_block(text, 14).commands == ["a = 1", "b = 2"]


def test_continuation_lines_are_spliced() -> None:
    text = ">>> for x in y:\n...     pass\n>>> z\nplain"
    from_primary = read_snippet(text, 3)
    from_continuation = read_snippet(text, 20)
    assert from_primary.command == "for x in y:\n    pass"
    assert from_continuation == from_primary
    assert from_primary.last_line_position == 16


def test_deep_continuation_walks_back_to_primary() -> None:
    text = "    >>> if ok:\n    ...     x = 1\n    ...     y = 2\n"
    snippet = read_snippet(text, len(text) - 3)
    assert snippet.command == "if ok:\n    x = 1\n    y = 2"
    assert snippet.start == 0


def test_block_stops_at_first_non_doctest_line() -> None:
    text = "intro\n>>> a = 1\n>>> for i in a:\n...     pass\n1\n>>> later\n"
    block = read_snippet_block(text, 8)
    assert block.commands == ["a = 1", "for i in a:\n    pass"]
    assert block.last_line_position == text.index("...")


def test_block_from_middle_line_finds_run_start() -> None:
    text = ">>> a\n>>> b\n>>> c\n"
    assert read_snippet_block(text, 13).commands == ["a", "b", "c"]


def test_orphan_continuation_starts_its_own_snippet() -> None:
    text = "prose\n... x\n... y\n"
    assert read_snippet(text, 6).command == "x\ny"


def test_no_snippet_found_carries_position() -> None:
    with pytest.raises(NoSnippetFound) as excinfo:
        read_snippet("plain text", 3)
    assert excinfo.value.position == 3
    assert isinstance(excinfo.value, LookupError)

    with pytest.raises(NoSnippetFound):
        read_snippet_block(">>> a\nplain", 7)
