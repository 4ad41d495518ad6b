"""Config hash for session responses and simulation output.

The hash MUST be computed identically in both places.
"""
import hashlib
import json

from pachislo.logic.models import GameConfig
from pachislo.logic.probability import RushContinueCurve


def get_config_hash(config: GameConfig) -> str:
    """
    Generate hash of a game configuration.

    Returns 16-char hex hash of the config snapshot. Host-supplied
    continuation functions hash by name only since they cannot be
    serialized.
    """
    rush_continue_fn = config.probability.rush_continue_fn
    if isinstance(rush_continue_fn, RushContinueCurve):
        curve = rush_continue_fn.model_dump()
    else:
        curve = {"callable": getattr(rush_continue_fn, "__qualname__", type(rush_continue_fn).__name__)}

    config_snapshot = {
        "balls": config.balls.model_dump(),
        "probability": config.probability.model_dump(),
        "rush_continue_fn": curve,
    }
    canonical = json.dumps(config_snapshot, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()[:16]
