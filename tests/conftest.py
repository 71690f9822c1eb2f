"""pytest configuration and fixtures for anchor-stack tests."""

import os

import pytest

from anchor_stack.protocols import register_layout_host, set_stack_config
from fakes import FakeLayoutHost


@pytest.fixture
def fake_host():
    return FakeLayoutHost()


@pytest.fixture(autouse=True)
def reset_globals():
    """Keep registered host and config from leaking between tests."""
    yield
    register_layout_host(None)
    set_stack_config(None)


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests
