"""Literate source annotation engine with PySide6 editor widgets."""

__version__ = "0.1.0"
