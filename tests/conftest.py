"""Shared test fixtures."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from LitPyside.core.settings import LiterateSettingsStore


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def settings_store() -> LiterateSettingsStore:
    return LiterateSettingsStore()
