"""
Pytest configuration and fixtures for GUI tests.

Provides Qt application setup for the picker dialog tests.
"""
import os
import sys
import pytest

# Ensure offscreen rendering for GUI tests by default
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

# Import Qt before any application code to set platform
from PySide6.QtWidgets import QApplication


@pytest.fixture(scope='session')
def qapp():
    """
    Session-wide QApplication instance.

    Creates a single QApplication for all GUI tests to share,
    preventing "QApplication already exists" errors.
    """
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)

    yield app

    # Note: We don't call app.quit() because pytest-qt manages the lifecycle


def pytest_collection_modifyitems(config, items):
    """Default all GUI tests to gui_offscreen unless explicitly marked."""
    for item in items:
        if "tests/gui" not in str(item.fspath).replace(os.sep, "/"):
            continue
        if item.get_closest_marker("gui_offscreen"):
            continue
        item.add_marker(pytest.mark.gui_offscreen)
