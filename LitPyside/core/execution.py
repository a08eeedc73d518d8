"""Execution backends that run snippet commands and return their output."""

from __future__ import annotations

import code
import io
import logging
import traceback
from contextlib import redirect_stderr, redirect_stdout
from typing import Protocol

logger = logging.getLogger(__name__)


class ExecutionBackend(Protocol):
    def execute(self, command: str) -> str:
        ...


class InProcessInterpreter:
    """Interactive interpreter sharing one namespace across commands.

    Commands compile in ``"single"`` mode, so bare expressions echo their
    repr the way they do at a ``>>>`` prompt.
    """

    def __init__(self, namespace: dict | None = None, *, filename: str = "<snippet>"):
        self.filename = filename
        self._namespace: dict = {} if namespace is None else namespace
        self._interpreter = code.InteractiveInterpreter(self._namespace)

    @property
    def namespace(self) -> dict:
        return self._namespace

    def execute(self, command: str) -> str:
        source = str(command or "").replace("\r", "")
        if not source.strip():
            return ""
        if "\n" in source.rstrip("\n"):
            # multi-line statements need a terminating blank line in "single" mode
            source = source.rstrip("\n") + "\n\n"

        buffer = io.StringIO()
        with redirect_stdout(buffer), redirect_stderr(buffer):
            try:
                incomplete = self._interpreter.runsource(source, self.filename, "single")
            except SystemExit as exc:
                # the host process keeps running; the exit is reported as output
                logger.debug("Snippet requested interpreter exit: %r", exc.code)
                buffer.write("".join(traceback.format_exception_only(type(exc), exc)))
                incomplete = False
        if incomplete:
            logger.debug("Discarding incomplete snippet: %r", source)
            return ""
        return buffer.getvalue()

    def reset(self) -> None:
        self._namespace.clear()
        self._interpreter = code.InteractiveInterpreter(self._namespace)


__all__ = ["ExecutionBackend", "InProcessInterpreter"]
