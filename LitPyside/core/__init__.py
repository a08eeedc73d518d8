"""Host-independent literate annotation engine."""

from .annotator import Annotator, StyleTag, VisualDirective
from .execution import ExecutionBackend, InProcessInterpreter
from .grammar import LiterateGrammar, build_grammar, format_title_block
from .regions import extend_region, extend_region_to_fixed_point
from .reveal import DebounceScheduler, RevealController, RevealWindow
from .session import ExecutionTarget, LiterateSession, OverlayRenderer, TextHost
from .settings import LiterateSettings, LiterateSettingsError, LiterateSettingsStore, shared_settings
from .snippets import NoSnippetFound, Snippet, SnippetBlock, read_snippet, read_snippet_block
from .titles import TextEdit, apply_edits, cycle_title, resize_underline

__all__ = [
    "Annotator",
    "DebounceScheduler",
    "ExecutionBackend",
    "ExecutionTarget",
    "InProcessInterpreter",
    "LiterateGrammar",
    "LiterateSession",
    "LiterateSettings",
    "LiterateSettingsError",
    "LiterateSettingsStore",
    "NoSnippetFound",
    "OverlayRenderer",
    "RevealController",
    "RevealWindow",
    "Snippet",
    "SnippetBlock",
    "StyleTag",
    "TextEdit",
    "TextHost",
    "VisualDirective",
    "apply_edits",
    "build_grammar",
    "cycle_title",
    "extend_region",
    "extend_region_to_fixed_point",
    "format_title_block",
    "read_snippet",
    "read_snippet_block",
    "resize_underline",
    "shared_settings",
]
