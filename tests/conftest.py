import sys
from pathlib import Path

import pytest

# Ensure the project root is importable when pytest starts from any directory
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from history import HistoryRepository  # noqa: E402
from simulation import ExpressionSession  # noqa: E402


@pytest.fixture
def history():
    return HistoryRepository()


@pytest.fixture
def session(history):
    return ExpressionSession(history=history)


def values(tokens):
    """Token list -> plain strings, for readable assertions."""
    return [t.value for t in tokens]
