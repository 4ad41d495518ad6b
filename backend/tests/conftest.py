"""Pytest fixtures for engine and API tests."""
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from pachislo.logic.engine import GameStateMachine
from pachislo.logic.models import (
    BallsConfig,
    GameConfig,
    Probability,
    SlotProbability,
)
from pachislo.logic.rng import RNGBase, SeededRNG
from pachislo.logic.slot import SlotRenderer
from pachislo.main import app
from pachislo.output import RecordingOutput
from pachislo.session_store import session_store


class ScriptedRNG(RNGBase):
    """RNG that replays fixed random() values, then repeats the last one."""

    def __init__(self, values: list[float]):
        self._values = list(values)
        self._last = values[-1] if values else 0.0
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self._values:
            self._last = self._values.pop(0)
        return self._last

    def randint(self, a: int, b: int) -> int:
        return a


def build_config(
    balls: tuple[int, int, int] = (100, 15, 50),
    normal: tuple[float, float, float] = (0.1, 0.05, 0.02),
    rush: tuple[float, float, float] = (0.8, 0.1, 0.05),
    rush_continue: tuple[float, float, float] = (0.7, 0.1, 0.05),
    rush_continue_fn: Callable[[int], float] = lambda n: 0.5,
) -> GameConfig:
    """Build a GameConfig from plain tuples."""
    init_balls, incremental_balls, incremental_rush = balls
    return GameConfig(
        balls=BallsConfig(
            init_balls=init_balls,
            incremental_balls=incremental_balls,
            incremental_rush=incremental_rush,
        ),
        probability=Probability(
            normal=SlotProbability.from_tuple(normal),
            rush=SlotProbability.from_tuple(rush),
            rush_continue=SlotProbability.from_tuple(rush_continue),
            rush_continue_fn=rush_continue_fn,
        ),
    )


@pytest.fixture
def make_config() -> Callable[..., GameConfig]:
    """Factory for game configs."""
    return build_config


@pytest.fixture
def scripted_rng() -> Callable[[list[float]], ScriptedRNG]:
    """Factory for RNGs with fixed random() values."""
    return ScriptedRNG


@pytest.fixture
def recorder() -> RecordingOutput:
    """Fresh event recorder."""
    return RecordingOutput()


@pytest.fixture
def make_machine(recorder: RecordingOutput) -> Callable[..., GameStateMachine]:
    """Factory for state machines wired to the recorder fixture."""

    def _make(config: GameConfig | None = None, rng: RNGBase | None = None) -> GameStateMachine:
        return GameStateMachine(
            config or build_config(),
            output=recorder,
            rng=rng or SeededRNG(seed=42),
            renderer=SlotRenderer(rng=SeededRNG(seed=7)),
        )

    return _make


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """TestClient with an empty session store."""
    session_store.clear()
    with TestClient(app) as test_client:
        yield test_client
    session_store.clear()
