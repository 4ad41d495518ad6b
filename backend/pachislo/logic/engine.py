"""Game state machine: mode transitions, ball economy and event emission."""
import logging
from typing import Any, Callable

from pachislo.errors import ErrorCode, PachisloError
from pachislo.logic.ledger import BallLedger
from pachislo.logic.lottery import LotteryEngine
from pachislo.logic.models import (
    Command,
    ControlFlow,
    GameConfig,
    GameState,
    LotteryMode,
    NormalState,
    RushState,
    Transition,
    UninitializedState,
)
from pachislo.logic.probability import ProbabilityModel
from pachislo.logic.rng import ProductionRNG, RNGBase
from pachislo.logic.slot import SlotRenderer
from pachislo.output import GameOutput, LoggingOutput


logger = logging.getLogger(__name__)

UNINITIALIZED = "Uninitialized"
NORMAL = "Normal"
RUSH = "Rush"


class GameStateMachine:
    """
    Pachislo game engine.

    Implements:
    - Session start with the configured ball count
    - Ball launches from the active pool
    - Normal draws with rush entry check on a win
    - Rush continuation with the eligibility gate
    - Finish on explicit command or when balls run out

    Every accepted command emits exactly one Transition; lottery events
    come before it and the finish event after it.
    """

    def __init__(
        self,
        config: GameConfig,
        output: GameOutput | None = None,
        rng: RNGBase | None = None,
        renderer: SlotRenderer | None = None,
    ):
        self.config = config
        self.output = output or LoggingOutput()
        self.lottery = LotteryEngine(ProbabilityModel(config.probability), rng or ProductionRNG())
        self.renderer = renderer or SlotRenderer()

        self._mode = UNINITIALIZED
        self._ledger = BallLedger()
        self._n = 0
        self._started_emitting = False
        self.finished = False

        self._handlers: dict[Command, Callable[[], bool]] = {
            Command.START_GAME: self._start_game,
            Command.LAUNCH_BALL: self._launch_ball,
            Command.CAUSE_LOTTERY: self._cause_lottery,
            Command.FINISH_GAME: self._finish_game,
        }

    @property
    def state(self) -> GameState:
        """Snapshot of the current state."""
        if self._mode == NORMAL:
            return NormalState(balls=self._ledger.balls)
        if self._mode == RUSH:
            return RushState(
                balls=self._ledger.balls,
                rush_balls=self._ledger.rush_balls,
                n=self._n,
            )
        return UninitializedState()

    def apply(self, command: Command) -> ControlFlow:
        """
        Apply one validated command.

        Returns BREAK once the finish event has been emitted; commands after
        that are ignored.
        """
        if not isinstance(command, Command):
            raise PachisloError(
                ErrorCode.UNRECOGNIZED_COMMAND,
                f"Expected a Command, got {command!r}",
            )
        if self.finished:
            logger.warning("Ignoring %s: game already finished", command.value)
            return ControlFlow.BREAK

        before = self.state
        finish = self._handlers[command]()
        after = self.state
        if finish:
            self.finished = True

        # Only the very first transition has no predecessor
        transition = Transition(before=before if self._started_emitting else None, after=after)
        self._started_emitting = True
        self._emit("on_transition", transition)
        if finish:
            logger.info("Game finished in %s", after.kind)
            self._emit("on_finish", after)
            return ControlFlow.BREAK
        return ControlFlow.CONTINUE

    # === Handlers: return True when the command finishes the game ===

    def _start_game(self) -> bool:
        if self._mode != UNINITIALIZED:
            logger.info("StartGame ignored in %s mode", self._mode)
            return False
        self._ledger = BallLedger(balls=self.config.balls.init_balls)
        self._mode = NORMAL
        self._n = 0
        return False

    def _launch_ball(self) -> bool:
        if self._mode == UNINITIALIZED:
            logger.info("LaunchBall ignored before StartGame")
            return False
        if self._mode == NORMAL:
            if self._ledger.balls == 0:
                return True
            self._ledger.debit(1)
            return False
        # Rush: rush balls first, then the player's own
        return not self._ledger.debit_active()

    def _cause_lottery(self) -> bool:
        if self._mode == NORMAL:
            self._normal_lottery()
        elif self._mode == RUSH:
            self._rush_continue_lottery()
        else:
            logger.info("CauseLottery ignored before StartGame")
        return False

    def _finish_game(self) -> bool:
        return True

    # === Lottery flows ===

    def _normal_lottery(self) -> None:
        """Both draws are shown before the ledger or mode changes."""
        result = self.lottery.draw(LotteryMode.NORMAL)
        self._emit("on_lottery_normal", result, self.renderer.produce(result))
        if not result.is_win():
            return

        entry = self.lottery.draw(LotteryMode.RUSH)
        self._emit("on_lottery_rush", entry, self.renderer.produce(entry))

        self._ledger.credit(self.config.balls.incremental_balls)
        if entry.is_win():
            self._enter_rush()

    def _rush_continue_lottery(self) -> None:
        draw = self.lottery.draw_continuation(self._n)
        self._emit("on_lottery_rush_continue", draw.result, self.renderer.produce(draw.result))
        if draw.granted:
            self._n += 1
            self._ledger.credit_rush(self.config.balls.incremental_rush)
        else:
            self._exit_rush()

    def _enter_rush(self) -> None:
        self._mode = RUSH
        self._n = 0
        self._ledger.settle_rush()
        self._ledger.credit_rush(self.config.balls.incremental_rush)
        logger.info("Rush entered with %d rush balls", self._ledger.rush_balls)

    def _exit_rush(self) -> None:
        settled = self._ledger.settle_rush()
        logger.info("Rush ended after %d continuations, %d balls settled", self._n, settled)
        self._mode = NORMAL
        self._n = 0

    def _emit(self, method: str, *args: Any) -> None:
        """Call the output; failures surface as HOST_CALLBACK_FAILURE."""
        try:
            getattr(self.output, method)(*args)
        except PachisloError:
            raise
        except Exception as e:
            logger.warning("Output callback %s failed: %s", method, e)
            raise PachisloError(
                ErrorCode.HOST_CALLBACK_FAILURE,
                f"Output callback {method} failed: {e}",
            ) from e
