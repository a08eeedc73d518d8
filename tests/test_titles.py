import pytest

from LitPyside.core.grammar import build_grammar
from LitPyside.core.titles import TextEdit, apply_edits, cycle_title, resize_underline


def cycled(text: str, pos: int = 0, grammar=None) -> str:
    return cycle_title(text, pos, grammar=grammar).apply(text)


def test_cycle_title_exhaustion() -> None:
    states = ["Title\n=====\nbody"]
    for _ in range(4):
        states.append(cycled(states[-1]))
    assert states == [
        "Title\n=====\nbody",
        "Title\n-----\nbody",
        "Title\n~~~~~\nbody",
        "Title\nbody",
        "Title\n=====\nbody",
    ]


def test_cycle_from_underline_line() -> None:
    assert cycled("Title\n=====", 8) == "Title\n-----"


def test_cycle_resynchronizes_before_advancing() -> None:
    text = "Longer title\n-----"
    once = cycled(text)
    assert once == "Longer title\n" + "-" * 12
    assert cycled(once) == "Longer title\n" + "~" * 12


def test_cycle_treats_unconfigured_underline_as_text() -> None:
    assert cycled("Title\n^^^^^") == "Title\n=====\n^^^^^"


def test_cycle_adds_underline_with_comment_marker() -> None:
    assert cycled("    # Notes\ncode()", 6) == "    # Notes\n    # =====\ncode()"


def test_cycle_inserts_scaffold_on_blank_line() -> None:
    text = "a = 1\n\nb = 2"
    edit = cycle_title(text, 6)
    assert edit == TextEdit(6, 6, "# Title\n# =====")
    assert edit.apply(text) == "a = 1\n# Title\n# =====\nb = 2"


def test_cycle_with_two_styles() -> None:
    grammar = build_grammar(("*", "="))
    text = "Head\n****"
    assert cycled(text, grammar=grammar) == "Head\n===="
    assert cycled("Head\n====", grammar=grammar) == "Head"


def test_resize_underline_after_title_edit() -> None:
    text = "# Hi!!!\n# ==\nrest"
    edit = resize_underline(text, 3)
    assert edit == TextEdit(10, 12, "=====")
    resized = edit.apply(text)
    assert resized == "# Hi!!!\n# =====\nrest"
    assert resize_underline(resized, 3) is None


def test_resize_keeps_underline_character() -> None:
    assert resize_underline("Ab\n~~~~~~", 0).apply("Ab\n~~~~~~") == "Ab\n~~"


def test_resize_uses_display_width() -> None:
    text = "日本\n=="
    assert resize_underline(text, 0).apply(text) == "日本\n===="


def test_resize_ignores_plain_lines() -> None:
    assert resize_underline("nothing here\n", 2) is None


@pytest.mark.parametrize("new_title", ["A", "Much longer title", "Mid"])
def test_underline_auto_resize_property(new_title: str) -> None:
    text = "Title\n-----\n"
    edited = new_title + text[len("Title"):]
    synced = resize_underline(edited, 0).apply(edited)
    assert synced == f"{new_title}\n{'-' * len(new_title)}\n"


def test_apply_edits_right_to_left() -> None:
    edits = [TextEdit(0, 1, "AA"), TextEdit(4, 5, "EE")]
    assert apply_edits("abcdef", edits) == "AAbcdEEf"
