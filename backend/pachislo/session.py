"""Command boundary: parses commands and drives one game session."""
import logging
import threading
from typing import Any, Iterable, Mapping, Protocol

from pachislo.errors import ErrorCode, PachisloError, invalid_configuration
from pachislo.logic.engine import GameStateMachine
from pachislo.logic.models import Command, ControlFlow, GameConfig, GameState
from pachislo.logic.rng import RNGBase, make_render_rng, make_rng
from pachislo.logic.slot import DEFAULT_REEL_COUNT, DEFAULT_SYMBOLS, SlotRenderer
from pachislo.output import GameOutput


logger = logging.getLogger(__name__)


# Text accepted at the boundary; "Finish" is an alias of FinishGame
COMMAND_ALIASES: dict[str, Command] = {
    "StartGame": Command.START_GAME,
    "LaunchBall": Command.LAUNCH_BALL,
    "CauseLottery": Command.CAUSE_LOTTERY,
    "FinishGame": Command.FINISH_GAME,
    "Finish": Command.FINISH_GAME,
}


def parse_command(command: str | Command) -> Command:
    """
    Map boundary input to a Command.

    Raises UNRECOGNIZED_COMMAND for anything else; nothing is mutated.
    """
    if isinstance(command, Command):
        return command
    if isinstance(command, str) and command in COMMAND_ALIASES:
        return COMMAND_ALIASES[command]
    raise PachisloError(
        ErrorCode.UNRECOGNIZED_COMMAND,
        f"Unrecognized command {command!r}. Allowed: {sorted(COMMAND_ALIASES)}",
    )


class UserInput(Protocol):
    """Source of commands for an interactive loop."""

    def wait_for_input(self) -> str | Command:
        ...


class ScriptedInput:
    """Replays a fixed list of commands, then finishes."""

    def __init__(self, commands: Iterable[str | Command]):
        self._commands = iter(commands)

    def wait_for_input(self) -> str | Command:
        return next(self._commands, Command.FINISH_GAME)


class GameSession:
    """
    One game session behind a lock.

    The whole command call runs under the session lock, so concurrent
    callers are serialized one command at a time.
    """

    def __init__(
        self,
        config: GameConfig | Mapping[str, Any],
        output: GameOutput | None = None,
        seed: int | None = None,
        rng: RNGBase | None = None,
        renderer: SlotRenderer | None = None,
        reel_count: int = DEFAULT_REEL_COUNT,
        symbols: Iterable[Any] = DEFAULT_SYMBOLS,
    ):
        if isinstance(config, Mapping):
            config = GameConfig.from_mapping(config)
        if not isinstance(config, GameConfig):
            raise invalid_configuration(f"Expected GameConfig, got {type(config).__name__}")

        self.seed = seed
        self._lock = threading.Lock()
        self._machine = GameStateMachine(
            config,
            output=output,
            rng=rng or make_rng(seed),
            renderer=renderer or SlotRenderer(reel_count, list(symbols), make_render_rng(seed)),
        )
        logger.info("Session created (seed=%s)", seed)

    @property
    def config(self) -> GameConfig:
        return self._machine.config

    @property
    def state(self) -> GameState:
        with self._lock:
            return self._machine.state

    @property
    def finished(self) -> bool:
        with self._lock:
            return self._machine.finished

    def run_step_with_command(self, command: str | Command) -> ControlFlow:
        """Parse and apply one command; returns BREAK once finished."""
        try:
            parsed = parse_command(command)
        except PachisloError:
            logger.warning("Rejected command %r", command)
            raise
        with self._lock:
            return self._machine.apply(parsed)

    def run(self, user_input: UserInput) -> GameState:
        """Read commands until the game finishes; returns the final state."""
        while self.run_step_with_command(user_input.wait_for_input()) == ControlFlow.CONTINUE:
            pass
        return self.state
