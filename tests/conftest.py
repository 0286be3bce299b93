"""Shared test fixtures."""

import os
import random
import sys
from typing import List, Tuple

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from audio import AudioSink
from engine import ComparisonSession
from main import create_app


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class RecordingSink(AudioSink):
    """AudioSink that remembers every cue it receives."""

    def __init__(self):
        self.calls: List[Tuple] = []

    def on_comparison(self, values, indices, max_value):
        self.calls.append(("comparison", tuple(indices), max_value))

    def on_swap(self, values, indices, max_value):
        self.calls.append(("swap", tuple(indices), max_value))

    def on_completion(self):
        self.calls.append(("completion",))

    def kinds(self) -> List[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def clock() -> FakeClock:
    """Return a fake monotonic clock starting at t=100s."""
    return FakeClock()


@pytest.fixture
def sink() -> RecordingSink:
    """Return an audio sink that records cues."""
    return RecordingSink()


@pytest.fixture
def rng() -> random.Random:
    """Return a seeded random source."""
    return random.Random(1234)


@pytest.fixture
def seeded_session(clock: FakeClock, rng: random.Random) -> ComparisonSession:
    """Return a session with default settings, a seeded array and a fake clock."""
    return ComparisonSession(rng=rng, clock=clock)


@pytest.fixture
def app():
    """Return a fresh Flask app with its own session registry."""
    return create_app({"TESTING": True, "SECRET_KEY": "test-secret"})


@pytest.fixture
def client(app):
    """Return a test client bound to a single browser session."""
    return app.test_client()
