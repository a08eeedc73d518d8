"""PySide6 widgets hosting the literate annotation engine."""

from .interpreter_console import InterpreterConsole
from .literate_editor import LiterateEditor
from .literate_highlighter import LiterateHighlighter

__all__ = ["InterpreterConsole", "LiterateEditor", "LiterateHighlighter"]
