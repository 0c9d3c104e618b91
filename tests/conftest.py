from __future__ import annotations

import os
import pytest
from PySide6.QtCore import QCoreApplication

from coinvista.storage import InMemoryStorage


@pytest.fixture(scope="session", autouse=True)
def _qt_app():
    # Use offscreen to avoid GUI requirement in CI
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()
