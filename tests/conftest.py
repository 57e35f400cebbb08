import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class SequenceRandom:
    """Random source replaying a fixed list of draws."""

    def __init__(self, values):
        self._values = list(values)
        self._index = 0

    def random(self) -> float:
        if self._index >= len(self._values):
            raise AssertionError("random source exhausted")
        value = self._values[self._index]
        self._index += 1
        return value

    @property
    def used(self) -> int:
        return self._index


@pytest.fixture
def sequence_random():
    return SequenceRandom


@pytest.fixture(scope="session")
def app_instance():
    """Create a QApplication instance for the test session."""
    from PyQt5.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    return app
