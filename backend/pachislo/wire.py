"""External representation of engine values.

Values use the externally tagged form:

    "Uninitialized"
    {"Normal": {"balls": 99}}
    {"Rush": {"balls": 99, "rush_balls": 50, "n": 0}}
    {"Win": "FakeWin"}
    {"before": <state or null>, "after": <state>}
"""
from typing import Any

from pydantic import TypeAdapter, ValidationError

from pachislo.errors import ErrorCode, PachisloError
from pachislo.logic.models import (
    GameState,
    Lose,
    LoseKind,
    Transition,
    UninitializedState,
    Win,
    WinKind,
)


_state_adapter: TypeAdapter = TypeAdapter(GameState)


def dump_state(state: GameState) -> Any:
    if isinstance(state, UninitializedState):
        return "Uninitialized"
    return {state.kind: state.model_dump(exclude={"kind"})}


def load_state(data: Any) -> GameState:
    """Raises INVALID_REQUEST for anything that is not a wire state."""
    if data == "Uninitialized":
        return UninitializedState()
    if not isinstance(data, dict) or len(data) != 1:
        raise PachisloError(ErrorCode.INVALID_REQUEST, f"Malformed game state: {data!r}")

    (tag, fields), = data.items()
    if tag not in ("Normal", "Rush") or not isinstance(fields, dict):
        raise PachisloError(ErrorCode.INVALID_REQUEST, f"Unknown game state: {tag!r}")
    try:
        return _state_adapter.validate_python({**fields, "kind": tag})
    except ValidationError as e:
        raise PachisloError(ErrorCode.INVALID_REQUEST, f"Invalid {tag} state: {e}") from e


def dump_result(result: Win | Lose) -> dict[str, str]:
    return {result.outcome: result.kind.value}


def load_result(data: Any) -> Win | Lose:
    if not isinstance(data, dict) or len(data) != 1:
        raise PachisloError(ErrorCode.INVALID_REQUEST, f"Malformed lottery result: {data!r}")
    (tag, kind), = data.items()
    try:
        if tag == "Win":
            return Win(kind=WinKind(kind))
        if tag == "Lose":
            return Lose(kind=LoseKind(kind))
    except ValueError as e:
        raise PachisloError(ErrorCode.INVALID_REQUEST, f"Unknown {tag} kind: {kind!r}") from e
    raise PachisloError(ErrorCode.INVALID_REQUEST, f"Unknown lottery result: {tag!r}")


def dump_transition(transition: Transition) -> dict[str, Any]:
    return {
        "before": None if transition.before is None else dump_state(transition.before),
        "after": dump_state(transition.after),
    }


def load_transition(data: Any) -> Transition:
    if not isinstance(data, dict) or "after" not in data:
        raise PachisloError(ErrorCode.INVALID_REQUEST, f"Malformed transition: {data!r}")
    before = data.get("before")
    return Transition(
        before=None if before is None else load_state(before),
        after=load_state(data["after"]),
    )

