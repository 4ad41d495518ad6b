"""Lottery draw tests: ordered cumulative thresholds and continuation gate."""
import pytest

from pachislo.errors import ErrorCode, PachisloError
from pachislo.logic.lottery import LotteryEngine, classify, draw
from pachislo.logic.models import (
    Lose,
    LoseKind,
    LotteryMode,
    SlotProbability,
    Win,
    WinKind,
)
from pachislo.logic.probability import ProbabilityModel, RushContinueCurve
from pachislo.logic.rng import SeededRNG


TABLE = SlotProbability(win=0.1, fake_win=0.05, fake_lose=0.02)


class TestClassify:
    """One sample scanned against win, fake_win, fake_lose in order."""

    @pytest.mark.parametrize(
        "u,expected",
        [
            (0.0, Win(kind=WinKind.DEFAULT)),
            (0.099, Win(kind=WinKind.DEFAULT)),
            (0.1, Win(kind=WinKind.FAKE_WIN)),
            (0.149, Win(kind=WinKind.FAKE_WIN)),
            (0.16, Lose(kind=LoseKind.FAKE_LOSE)),
            (0.5, Lose(kind=LoseKind.DEFAULT)),
            (0.999, Lose(kind=LoseKind.DEFAULT)),
        ],
    )
    def test_threshold_scan(self, u, expected):
        assert classify(u, TABLE) == expected

    def test_thresholds_are_cumulative_not_independent(self):
        """fake_win=0.5 covers [0.5, 1.0) when win=0.5."""
        table = SlotProbability(win=0.5, fake_win=0.5, fake_lose=0.5)
        assert classify(0.7, table) == Win(kind=WinKind.FAKE_WIN)

    def test_fake_lose_only(self):
        table = SlotProbability(win=0.0, fake_win=0.0, fake_lose=1.0)
        assert classify(0.3, table) == Lose(kind=LoseKind.FAKE_LOSE)


class TestDeterministicTables:
    """Degenerate tables give a fixed category for any seed."""

    @pytest.mark.parametrize("seed", [0, 1, 42, 2025])
    def test_certain_win(self, seed):
        rng = SeededRNG(seed=seed)
        table = SlotProbability(win=1.0)
        for _ in range(500):
            assert draw(table, rng) == Win(kind=WinKind.DEFAULT)

    @pytest.mark.parametrize("seed", [0, 1, 42, 2025])
    def test_certain_loss(self, seed):
        rng = SeededRNG(seed=seed)
        table = SlotProbability()
        for _ in range(500):
            assert draw(table, rng) == Lose(kind=LoseKind.DEFAULT)


class TestLotteryEngine:
    """Table selection by mode and the continuation gate."""

    def _engine(self, make_config, rng, **kwargs):
        config = make_config(**kwargs)
        return LotteryEngine(ProbabilityModel(config.probability), rng)

    def test_mode_selects_table(self, make_config, scripted_rng):
        engine = self._engine(
            make_config,
            scripted_rng([0.5]),
            normal=(0.0, 0.0, 0.0),
            rush=(1.0, 0.0, 0.0),
            rush_continue=(0.0, 0.0, 1.0),
        )
        assert engine.draw(LotteryMode.NORMAL) == Lose(kind=LoseKind.DEFAULT)
        assert engine.draw(LotteryMode.RUSH) == Win(kind=WinKind.DEFAULT)
        assert engine.draw(LotteryMode.RUSH_CONTINUE) == Lose(kind=LoseKind.FAKE_LOSE)

    def test_continuation_granted(self, make_config, scripted_rng):
        """Gate sample under p, then a winning outcome sample."""
        engine = self._engine(
            make_config,
            scripted_rng([0.3, 0.0]),
            rush_continue_fn=lambda n: 0.5,
        )
        result = engine.draw_continuation(0)
        assert result.eligible is True
        assert result.result == Win(kind=WinKind.DEFAULT)
        assert result.granted is True
        assert result.probability == 0.5

    def test_gate_denial_draws_only_losing_kinds(self, make_config, scripted_rng):
        """A failed gate with a winning sample shows FakeLose, never a win."""
        engine = self._engine(
            make_config,
            scripted_rng([0.6, 0.0]),
            rush_continue_fn=lambda n: 0.5,
        )
        result = engine.draw_continuation(0)
        assert result.eligible is False
        assert result.result == Lose(kind=LoseKind.FAKE_LOSE)
        assert result.granted is False

    def test_gate_denial_plain_loss(self, make_config, scripted_rng):
        engine = self._engine(
            make_config,
            scripted_rng([0.6, 0.9]),
            rush_continue_fn=lambda n: 0.5,
        )
        assert engine.draw_continuation(0).result == Lose(kind=LoseKind.DEFAULT)

    def test_eligible_but_losing_outcome(self, make_config, scripted_rng):
        engine = self._engine(
            make_config,
            scripted_rng([0.0, 0.9]),
            rush_continue_fn=lambda n: 1.0,
        )
        result = engine.draw_continuation(0)
        assert result.eligible is True
        assert result.granted is False

    def test_continuation_fn_receives_count(self, make_config, scripted_rng):
        seen = []

        def fn(n):
            seen.append(n)
            return 1.0

        engine = self._engine(make_config, scripted_rng([0.0]), rush_continue_fn=fn)
        engine.draw_continuation(0)
        engine.draw_continuation(3)
        assert seen == [0, 3]

    def test_callable_object_as_continuation_fn(self, make_config, scripted_rng):
        """Any callable taking n works, including a curve model."""
        curve = RushContinueCurve(initial=0.5, decay=1.0, floor=0.0)
        engine = self._engine(make_config, scripted_rng([0.4, 0.0]), rush_continue_fn=curve)
        result = engine.draw_continuation(7)
        assert result.probability == pytest.approx(0.5)
        assert result.granted is True

    def test_raising_continuation_fn(self, make_config, scripted_rng):
        def fn(n):
            raise RuntimeError("host gone")

        engine = self._engine(make_config, scripted_rng([0.0]), rush_continue_fn=fn)
        with pytest.raises(PachisloError) as exc_info:
            engine.draw_continuation(0)
        assert exc_info.value.code == ErrorCode.HOST_CALLBACK_FAILURE

    def test_non_numeric_continuation_fn(self, make_config, scripted_rng):
        engine = self._engine(
            make_config, scripted_rng([0.0]), rush_continue_fn=lambda n: "often"
        )
        with pytest.raises(PachisloError) as exc_info:
            engine.draw_continuation(0)
        assert exc_info.value.code == ErrorCode.HOST_CALLBACK_FAILURE


class TestRushContinueCurve:
    """Geometric decay with a floor."""

    def test_values(self):
        curve = RushContinueCurve(initial=0.8, decay=0.5, floor=0.1)
        assert curve(0) == pytest.approx(0.8)
        assert curve(1) == pytest.approx(0.4)
        assert curve(2) == pytest.approx(0.2)
        assert curve(5) == pytest.approx(0.1)

    def test_non_increasing(self):
        curve = RushContinueCurve(initial=0.9, decay=0.85, floor=0.05)
        values = [curve(n) for n in range(50)]
        assert all(a >= b for a, b in zip(values, values[1:]))
