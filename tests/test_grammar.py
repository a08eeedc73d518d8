import pytest

from LitPyside.core.grammar import (
    LiterateGrammar,
    PromptKind,
    build_grammar,
    format_title_block,
)
from LitPyside.core.helpers import display_width


@pytest.fixture
def grammar() -> LiterateGrammar:
    return build_grammar()


def test_plain_title_block(grammar: LiterateGrammar) -> None:
    text = "Intro\n=====\nbody"
    block = grammar.match_title_block(text, 0)
    assert block is not None
    assert block.title == "Intro"
    assert block.marker == ""
    assert block.underline_char == "="
    assert block.underline_length == 5
    assert block.level == 1
    assert (block.start, block.end) == (0, 12)
    assert block.synchronized


def test_comment_title_block_exposes_spans(grammar: LiterateGrammar) -> None:
    text = "# Section\n# -------\n"
    block = grammar.match_title_block(text, 0)
    assert block is not None
    assert block.marker == "# "
    assert block.underline_marker == "# "
    assert block.title == "Section"
    assert block.level == 2
    assert block.marker_span == (0, 2)
    assert block.title_span == (2, 9)
    assert block.underline_marker_span == (10, 12)
    assert block.underline_span == (12, 19)


@pytest.mark.parametrize("index", [0, 1, 2])
@pytest.mark.parametrize("title", ["Hello world", "x", "Données", "日本語"])
@pytest.mark.parametrize("marker", ["", "# ", "    ## "])
def test_title_round_trip(grammar: LiterateGrammar, title: str, index: int, marker: str) -> None:
    text = format_title_block(title, index, marker=marker)
    block = grammar.match_title_block(text, 0)
    assert block is not None
    assert block.title == title
    assert grammar.style_index(block.underline_char) == index
    assert block.level == index + 1
    assert block.underline_length == display_width(title)


def test_title_block_at_accepts_underline_line(grammar: LiterateGrammar) -> None:
    text = "Title\n=====\nbody"
    assert grammar.title_block_at(text, 8).title == "Title"
    assert grammar.title_block_at(text, 13) is None


def test_only_configured_styles_underline(grammar: LiterateGrammar) -> None:
    assert grammar.match_title_block("Title\n^^^^^", 0) is None
    assert grammar.match_title_block("def compute():\n    _", 0) is None
    assert grammar.match_title_block("result = call(\n    *", 0) is None
    assert grammar.style_index("^") is None


def test_underline_run_is_never_a_title(grammar: LiterateGrammar) -> None:
    assert grammar.match_title_block("=====\n-", 0) is None
    assert grammar.match_title_block("# ~~~\n# ===", 0) is None
    assert grammar.title_block_at("A\n===\n---", 6) is None
    assert grammar.match_title_block("- item\n------", 0).title == "- item"


def test_malformed_titles_are_plain_text(grammar: LiterateGrammar) -> None:
    assert grammar.match_title_block("Title\n=-=-=", 0) is None
    assert grammar.match_title_block("Title\n\n=====", 0) is None
    assert grammar.match_title_block("# \n# =====", 0) is None
    assert list(grammar.iter_title_blocks("just prose\nmore prose\n")) == []


def test_iter_title_blocks_in_source_order(grammar: LiterateGrammar) -> None:
    text = "One\n===\n\ntext\n\n# Two\n# ---\n"
    titles = [block.title for block in grammar.iter_title_blocks(text)]
    assert titles == ["One", "Two"]


def test_doc_comments_need_exactly_two_markers(grammar: LiterateGrammar) -> None:
    text = "## prose\n### not prose\n##nospace\n    ##! loud prose\n# code comment\n"
    found = [(doc.start, doc.end, doc.marker_span) for doc in grammar.iter_doc_comments(text)]
    assert found == [(0, 8, (0, 3)), (33, 51, (33, 41))]


def test_doctest_lines(grammar: LiterateGrammar) -> None:
    primary = grammar.parse_doctest_line("# >>> x = 1", 0)
    assert primary.kind is PromptKind.PRIMARY
    assert primary.prefix == "# "
    assert primary.payload == "x = 1"
    assert primary.prompt_span == (2, 5)
    assert primary.payload_span == (6, 11)

    continuation = grammar.parse_doctest_line("...     pass", 0)
    assert continuation.is_continuation
    assert continuation.payload == "    pass"

    assert grammar.parse_doctest_line("x = 1  # >>> not a prompt", 0) is None


def test_quoting_precedence(grammar: LiterateGrammar) -> None:
    text = "`a` and ``b``"
    spans = [(s.width, s.content, s.start, s.end) for s in grammar.iter_quoted_spans(text)]
    assert spans == [(1, "a", 0, 3), (2, "b", 8, 13)]


def test_double_quotes_never_split_into_singles(grammar: LiterateGrammar) -> None:
    spans = list(grammar.iter_quoted_spans("call ``f(x)`` now"))
    assert [(s.width, s.content) for s in spans] == [(2, "f(x)")]
    assert spans[0].content_span == (7, 11)


def test_single_quotes_reject_padded_content(grammar: LiterateGrammar) -> None:
    assert list(grammar.iter_quoted_spans("` a` and `b `")) == []
    spans = list(grammar.iter_quoted_spans("`a b`"))
    assert [s.content for s in spans] == ["a b"]


def test_quoted_spans_stay_on_one_line(grammar: LiterateGrammar) -> None:
    assert list(grammar.iter_quoted_spans("`a\nb` ``c\nd``")) == []


@pytest.mark.parametrize(
    "styles",
    [(), ("==",), ("#",), ("=", "="), ("a",), (" ",), ("`",)],
)
def test_invalid_title_styles(styles) -> None:
    with pytest.raises(ValueError):
        LiterateGrammar(styles)


def test_custom_styles_change_levels() -> None:
    grammar = build_grammar(("*", "="))
    block = grammar.match_title_block("Title\n=====", 0)
    assert block.level == 2
    assert grammar.title_level("-") is None


def test_display_width() -> None:
    assert display_width("abc") == 3
    assert display_width("日本") == 4
    assert display_width("é") == 1
