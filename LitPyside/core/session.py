"""One open literate document bound to its host editor.

The session owns no text.  It reads the buffer through a :class:`TextHost`,
writes title edits back through it, paints results through an
:class:`OverlayRenderer` and debounces reveal checks through a
:class:`~LitPyside.core.reveal.DebounceScheduler`.  Display toggles live in a
process-wide :class:`~LitPyside.core.settings.LiterateSettingsStore`; every
session subscribes to it and re-renders its whole document on change.
"""

from __future__ import annotations

import logging
from typing import Protocol

from . import titles
from .annotator import Annotator, EmbeddedHighlighter, VisualDirective
from .execution import ExecutionBackend
from .grammar import LiterateGrammar, build_grammar
from .regions import extend_region_to_fixed_point
from .reveal import DebounceScheduler, RevealController
from .settings import LiterateSettings, LiterateSettingsStore, shared_settings
from .snippets import read_snippet, read_snippet_block
from .titles import TextEdit

logger = logging.getLogger(__name__)


class TextHost(Protocol):
    def text(self) -> str:
        ...

    def cursor_position(self) -> int:
        ...

    def apply_edit(self, edit: TextEdit) -> None:
        ...

    def reannotate(self, start: int, end: int) -> None:
        """Re-render ``[start, end)`` with fresh directives."""
        ...


class OverlayRenderer(Protocol):
    def show_overlay(self, anchor: int, text: str) -> None:
        """Show ``text`` after the line starting at ``anchor``, replacing any overlay there."""
        ...

    def clear_overlays(self) -> None:
        ...


class ExecutionTarget(Protocol):
    def send(self, command: str, output: str) -> None:
        ...

    def scroll_to_end(self) -> None:
        ...


class LiterateSession:
    def __init__(
        self,
        host: TextHost,
        *,
        overlays: OverlayRenderer,
        scheduler: DebounceScheduler,
        backend: ExecutionBackend,
        target: ExecutionTarget | None = None,
        settings_store: LiterateSettingsStore | None = None,
        highlight: EmbeddedHighlighter | None = None,
        language: str = "python",
    ):
        self.host = host
        self.overlays = overlays
        self.backend = backend
        self.target = target
        self.settings_store = settings_store if settings_store is not None else shared_settings()
        self.annotator = Annotator(highlight=highlight, language=language)
        self.reveal = RevealController(
            scheduler=scheduler,
            cursor_position=host.cursor_position,
            title_span_at=self._title_span_at,
            reannotate=host.reannotate,
            settings=self.settings_store.snapshot,
        )
        self._unsubscribe = self.settings_store.subscribe(self._on_settings_changed)
        self._closed = False

    # ---------- state ----------

    @property
    def settings(self) -> LiterateSettings:
        return self.settings_store.snapshot()

    @property
    def grammar(self) -> LiterateGrammar:
        return build_grammar(tuple(self.settings.title_styles))

    @property
    def closed(self) -> bool:
        return self._closed

    def _title_span_at(self, position: int) -> tuple[int, int] | None:
        block = self.grammar.title_block_at(self.host.text(), position)
        return None if block is None else (block.start, block.end)

    def _on_settings_changed(self, _settings: LiterateSettings) -> None:
        self.refresh()

    # ---------- annotation ----------

    def annotate(self, start: int = 0, end: int | None = None) -> list[VisualDirective]:
        return self.annotate_text(self.host.text(), start, end)

    def annotate_text(
        self,
        text: str,
        start: int = 0,
        end: int | None = None,
        *,
        offset: int = 0,
    ) -> list[VisualDirective]:
        """Directives for ``text``, a slice of the document beginning at ``offset``.

        Positions in the result are relative to ``text``.
        """
        reveal = self.reveal.revealed
        if reveal is not None and offset:
            reveal = (reveal[0] - offset, reveal[1] - offset)
        return self.annotator.annotate(text, start, end, settings=self.settings, reveal=reveal)

    def refresh(self) -> None:
        self.host.reannotate(0, len(self.host.text()))

    # ---------- host notifications ----------

    def on_text_changed(self, position: int, removed: int = 0, added: int = 0) -> tuple[int, int]:
        """Resize a touched title underline and re-render the widened edit range."""
        self.overlays.clear_overlays()
        grammar = self.grammar
        edit = titles.resize_underline(self.host.text(), position, grammar=grammar)
        if edit is not None:
            logger.debug("Resizing title underline at [%d, %d)", edit.start, edit.end)
            self.host.apply_edit(edit)

        text = self.host.text()
        start, end = extend_region_to_fixed_point(text, position, int(position) + max(0, int(added)), grammar=grammar)
        self.host.reannotate(start, end)
        return start, end

    def on_cursor_moved(self, position: int) -> None:
        self.reveal.on_cursor_moved(position)

    # ---------- commands ----------

    def _apply(self, edit: TextEdit) -> None:
        self.host.apply_edit(edit)
        start, end = extend_region_to_fixed_point(
            self.host.text(), edit.start, edit.start + len(edit.text), grammar=self.grammar
        )
        self.host.reannotate(start, end)

    def cycle_title(self) -> TextEdit:
        edit = titles.cycle_title(self.host.text(), self.host.cursor_position(), grammar=self.grammar)
        self._apply(edit)
        return edit

    def _execute(self, command: str) -> str:
        logger.debug("Sending snippet to execution backend: %r", command)
        try:
            return str(self.backend.execute(command) or "")
        except Exception:
            logger.warning("Execution backend failed on %r", command, exc_info=True)
            raise

    def copy_snippet_to_target(self) -> str:
        snippet = read_snippet(self.host.text(), self.host.cursor_position(), grammar=self.grammar)
        output = self._execute(snippet.command)
        if self.target is not None:
            self.target.send(snippet.command, output)
            self.target.scroll_to_end()
        return output

    def eval_snippet_inline(self, block: bool = False) -> str:
        text = self.host.text()
        position = self.host.cursor_position()
        if block:
            found = read_snippet_block(text, position, grammar=self.grammar)
            commands = found.commands
        else:
            found = read_snippet(text, position, grammar=self.grammar)
            commands = [found.command]

        outputs: list[str] = []
        for command in commands:
            output = self._execute(command).rstrip("\n")
            if output:
                outputs.append(output)
        result = "\n".join(outputs)
        self.overlays.show_overlay(found.last_line_position, result)
        return result

    def toggle_quotes_markup(self) -> bool:
        return self.settings_store.toggle("hide_quotes")

    def toggle_title_markup(self) -> bool:
        return self.settings_store.toggle("hide_title_markup")

    def hide_all_markup(self) -> None:
        if not self.settings_store.update({"hide_title_markup": True, "hide_quotes": True}):
            self.refresh()

    # ---------- lifecycle ----------

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._unsubscribe()
        self.reveal.reset()


__all__ = ["ExecutionTarget", "LiterateSession", "OverlayRenderer", "TextHost"]
