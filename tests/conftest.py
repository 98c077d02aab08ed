import pytest

from workstat.models import TodoItem
from workstat.prefs import PreferenceStore
from workstat.store import TodoStore


@pytest.fixture
def prefs(tmp_path):
    return PreferenceStore(tmp_path / "preferences.ini")


@pytest.fixture
def store(prefs):
    s = TodoStore(prefs)
    s.load()
    return s


@pytest.fixture
def items():
    return [
        TodoItem(title="Write report", percentage=40.0, color="#007AFF", id="a"),
        TodoItem(title="Review PRs", percentage=30.0, color="#34C759", id="b"),
        TodoItem(title="Old task", percentage=50.0, color="#FF9500", completed=True, id="c"),
    ]
