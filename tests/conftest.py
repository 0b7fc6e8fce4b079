from pathlib import Path

import pytest

from streamsig.core import player
from streamsig.models.player import TransformFunction

DATA_DIR = Path(__file__).parent / "data"


class CountingEngine:
    """Script engine double that applies a Python transform and counts calls."""

    def __init__(self, transform=str.upper, error: Exception | None = None):
        self.transform = transform
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def execute(self, slot, fragment_id, source, function_name, argument):
        self.calls.append((function_name, argument))
        if self.error is not None:
            raise self.error
        return self.transform(argument)


@pytest.fixture
def player_js() -> str:
    return (DATA_DIR / "player.js").read_text(encoding="utf-8")


@pytest.fixture
def counting_engine() -> CountingEngine:
    return CountingEngine()


@pytest.fixture
def make_engine():
    return CountingEngine


@pytest.fixture
def fake_function() -> TransformFunction:
    return TransformFunction("fn", "var fn=function(a){return a};")


@pytest.fixture(autouse=True)
def reset_player_cache():
    player._player_functions = None
    yield
    player._player_functions = None
