import pytest
from PySide6.QtGui import QTextCursor

from LitPyside.core.annotator import StyleTag, VisualDirective
from LitPyside.core.settings import LiterateSettingsStore
from LitPyside.widgets import InterpreterConsole, LiterateEditor
from LitPyside.widgets.literate_editor import COMMAND_SHORTCUTS, QtDebounceScheduler
from LitPyside.widgets.literate_highlighter import HIDDEN_POINT_SIZE
from LitPyside.widgets.syntax_highlighters import delegate_highlight


@pytest.fixture
def editor(qapp, settings_store: LiterateSettingsStore):
    widget = LiterateEditor(settings_store=settings_store)
    yield widget
    widget.shutdown()
    widget.deleteLater()


def move_cursor(editor: LiterateEditor, position: int) -> None:
    cursor = editor.textCursor()
    cursor.setPosition(position)
    editor.setTextCursor(cursor)


def test_delegate_highlight_python(qapp) -> None:
    spans = delegate_highlight("def f(): pass", "python")
    assert any(start == 0 and count == 3 for start, count, _fmt in spans)
    assert delegate_highlight("def f(): pass", "cobol") == []


def test_eval_inline_shows_overlay(editor: LiterateEditor) -> None:
    editor.setPlainText(">>> 1 + 1\n")
    move_cursor(editor, 2)
    assert editor.eval_snippet_inline() == "2"
    assert editor.overlays() == {0: "2"}


def test_missing_snippet_is_reported(editor: LiterateEditor) -> None:
    messages: list[str] = []
    editor.messageRequested.connect(messages.append)
    editor.setPlainText("plain")
    move_cursor(editor, 0)
    assert editor.eval_snippet_inline() is None
    assert messages == ["No doctest snippet at position 0."]
    assert editor.overlays() == {}


def test_copy_to_console(qapp, settings_store: LiterateSettingsStore) -> None:
    console = InterpreterConsole()
    editor = LiterateEditor(target=console, settings_store=settings_store)
    try:
        editor.setPlainText("# >>> 6 * 7")
        move_cursor(editor, 0)
        assert editor.copy_snippet_to_target() == "42\n"
        assert console.transcript() == ">>> 6 * 7\n42"
    finally:
        editor.shutdown()


def test_typing_in_a_title_resizes_its_underline(editor: LiterateEditor) -> None:
    editor.setPlainText("Title\n=====\nbody")
    cursor = QTextCursor(editor.document())
    cursor.setPosition(5)
    cursor.insertText("!!")
    editor.flush_pending_changes()
    assert editor.toPlainText() == "Title!!\n=======\nbody"


def test_loading_text_does_not_resize(editor: LiterateEditor) -> None:
    editor.setPlainText("Title\n===\n")
    editor.flush_pending_changes()
    assert editor.toPlainText() == "Title\n===\n"


def test_text_change_clears_overlays(editor: LiterateEditor) -> None:
    editor.setPlainText(">>> 1 + 1\n")
    move_cursor(editor, 0)
    editor.eval_snippet_inline()
    editor.textCursor().insertText("x")
    editor.flush_pending_changes()
    assert editor.overlays() == {}


def test_cycle_title_command(editor: LiterateEditor) -> None:
    editor.setPlainText("Title\n=====\nbody")
    move_cursor(editor, 1)
    editor.cycle_title()
    assert editor.toPlainText() == "Title\n-----\nbody"


def test_hidden_and_ruled_formats(editor: LiterateEditor) -> None:
    highlighter = editor._highlighter
    hidden = highlighter.format_for(VisualDirective(0, 1, StyleTag.MARKUP, hidden=True))
    assert hidden.fontPointSize() == HIDDEN_POINT_SIZE
    assert hidden.foreground().color().alpha() == 0

    ruled = highlighter.format_for(VisualDirective(0, 5, StyleTag.TITLE_2, ruled=True))
    assert ruled.fontUnderline()
    assert not highlighter.format_for(VisualDirective(0, 5, StyleTag.TITLE_2)).fontUnderline()


def test_quote_delimiters_are_hidden_in_the_layout(editor: LiterateEditor) -> None:
    editor.setPlainText("see `a` here")
    editor.reannotate(0, len(editor.text()))
    ranges = editor.document().firstBlock().layout().formats()
    hidden = {(r.start, r.length) for r in ranges if r.format.fontPointSize() == HIDDEN_POINT_SIZE}
    assert (4, 1) in hidden
    assert (6, 1) in hidden


def test_toggle_commands_update_shared_settings(editor: LiterateEditor, settings_store) -> None:
    assert editor.toggle_quotes_markup() is False
    assert editor.toggle_title_markup() is True
    assert settings_store.snapshot().hide_quotes is False
    editor.hide_all_markup()
    assert settings_store.snapshot().hide_quotes is True


def test_command_actions_are_installed(editor: LiterateEditor) -> None:
    assert set(editor.command_actions) == set(COMMAND_SHORTCUTS)
    assert editor.command_actions["cycle_title"].shortcut().toString() == "Ctrl+Alt+T"


def test_shutdown_unsubscribes(qapp, settings_store: LiterateSettingsStore) -> None:
    editor = LiterateEditor(settings_store=settings_store)
    assert settings_store.subscriber_count == 1
    editor.shutdown()
    assert settings_store.subscriber_count == 0
    assert editor.session.closed


def test_debounce_scheduler(qapp) -> None:
    fired: list[bool] = []
    scheduler = QtDebounceScheduler()
    scheduler.schedule(10_000, lambda: fired.append(True))
    assert scheduler.pending
    scheduler.cancel()
    assert not scheduler.pending
    scheduler._fire()
    assert fired == []


def test_console_echoes_continuation_lines(qapp) -> None:
    console = InterpreterConsole()
    console.send("for i in x:\n    pass", "\n")
    assert console.transcript() == ">>> for i in x:\n...     pass"
    assert console.isReadOnly()
