"""Output boundary for game events.

The state machine reports every event to a GameOutput synchronously, in
the order the events happen.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol, Sequence

from pachislo.logic.models import GameState, Lose, Transition, Win
from pachislo.wire import dump_result, dump_state, dump_transition


logger = logging.getLogger(__name__)


class GameOutput(Protocol):
    """Protocol for event consumers."""

    def on_transition(self, transition: Transition) -> None:
        ...

    def on_finish(self, state: GameState) -> None:
        ...

    def on_lottery_normal(self, result: Win | Lose, reels: list[Any]) -> None:
        ...

    def on_lottery_rush(self, result: Win | Lose, reels: list[Any]) -> None:
        ...

    def on_lottery_rush_continue(self, result: Win | Lose, reels: list[Any]) -> None:
        ...


class LoggingOutput:
    """Default output that logs every event."""

    def on_transition(self, transition: Transition) -> None:
        logger.info(
            "TRANSITION %s -> %s",
            None if transition.before is None else dump_state(transition.before),
            dump_state(transition.after),
        )

    def on_finish(self, state: GameState) -> None:
        logger.info("FINISH %s", dump_state(state))

    def on_lottery_normal(self, result: Win | Lose, reels: list[Any]) -> None:
        logger.info("LOTTERY normal %s %s", dump_result(result), reels)

    def on_lottery_rush(self, result: Win | Lose, reels: list[Any]) -> None:
        logger.info("LOTTERY rush %s %s", dump_result(result), reels)

    def on_lottery_rush_continue(self, result: Win | Lose, reels: list[Any]) -> None:
        logger.info("LOTTERY rush_continue %s %s", dump_result(result), reels)


@dataclass
class RecordedEvent:
    """One boundary event in wire form."""

    name: str
    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.name, **self.data}


@dataclass
class RecordingOutput:
    """Collects events for later inspection (HTTP responses, tests)."""

    events: list[RecordedEvent] = field(default_factory=list)

    def on_transition(self, transition: Transition) -> None:
        self.events.append(RecordedEvent("transition", dump_transition(transition)))

    def on_finish(self, state: GameState) -> None:
        self.events.append(RecordedEvent("finish", {"state": dump_state(state)}))

    def on_lottery_normal(self, result: Win | Lose, reels: list[Any]) -> None:
        self._lottery("lotteryNormal", result, reels)

    def on_lottery_rush(self, result: Win | Lose, reels: list[Any]) -> None:
        self._lottery("lotteryRush", result, reels)

    def on_lottery_rush_continue(self, result: Win | Lose, reels: list[Any]) -> None:
        self._lottery("lotteryRushContinue", result, reels)

    def _lottery(self, name: str, result: Win | Lose, reels: list[Any]) -> None:
        self.events.append(
            RecordedEvent(name, {"result": dump_result(result), "reels": list(reels)})
        )

    def names(self) -> list[str]:
        return [event.name for event in self.events]

    def drain(self) -> list[dict[str, Any]]:
        """Return recorded events as dicts and clear the buffer."""
        drained = [event.to_dict() for event in self.events]
        self.events.clear()
        return drained


class CallbackOutput:
    """
    Bridges events to host callables.

    Each callable receives the opaque host context first, followed by the
    event values in wire form. Missing callables fall back to default.
    """

    def __init__(
        self,
        context: Any = None,
        default: Callable[..., Any] | None = None,
        finish_game: Callable[..., Any] | None = None,
        lottery_normal: Callable[..., Any] | None = None,
        lottery_rush: Callable[..., Any] | None = None,
        lottery_rush_continue: Callable[..., Any] | None = None,
    ):
        self.context = context
        self.default = default or _ignore
        self.finish_game = finish_game or _ignore
        self.lottery_normal = lottery_normal or _ignore
        self.lottery_rush = lottery_rush or _ignore
        self.lottery_rush_continue = lottery_rush_continue or _ignore

    def on_transition(self, transition: Transition) -> None:
        self.default(self.context, dump_transition(transition))

    def on_finish(self, state: GameState) -> None:
        self.finish_game(self.context, dump_state(state))

    def on_lottery_normal(self, result: Win | Lose, reels: list[Any]) -> None:
        self.lottery_normal(self.context, dump_result(result), list(reels))

    def on_lottery_rush(self, result: Win | Lose, reels: list[Any]) -> None:
        self.lottery_rush(self.context, dump_result(result), list(reels))

    def on_lottery_rush_continue(self, result: Win | Lose, reels: list[Any]) -> None:
        self.lottery_rush_continue(self.context, dump_result(result), list(reels))


class CompositeOutput:
    """Fans every event out to several outputs, in order."""

    def __init__(self, outputs: Sequence[GameOutput]):
        self.outputs = list(outputs)

    def on_transition(self, transition: Transition) -> None:
        for output in self.outputs:
            output.on_transition(transition)

    def on_finish(self, state: GameState) -> None:
        for output in self.outputs:
            output.on_finish(state)

    def on_lottery_normal(self, result: Win | Lose, reels: list[Any]) -> None:
        for output in self.outputs:
            output.on_lottery_normal(result, reels)

    def on_lottery_rush(self, result: Win | Lose, reels: list[Any]) -> None:
        for output in self.outputs:
            output.on_lottery_rush(result, reels)

    def on_lottery_rush_continue(self, result: Win | Lose, reels: list[Any]) -> None:
        for output in self.outputs:
            output.on_lottery_rush_continue(result, reels)


def _ignore(*args: Any) -> None:
    return None
