"""Application configuration derived from environment."""
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine and server settings."""

    model_config = ConfigDict(env_prefix="PACHISLO_")

    # Server
    debug: bool = False
    log_level: str = "INFO"

    # Protocol
    protocol_version: str = "1.0"

    # Ball economy
    init_balls: int = 100
    incremental_balls: int = 15
    incremental_rush: int = 50

    # Probability tables (win, fake_win, fake_lose)
    normal_probability: tuple[float, float, float] = (0.1, 0.05, 0.02)
    rush_probability: tuple[float, float, float] = (0.8, 0.1, 0.05)
    rush_continue_probability: tuple[float, float, float] = (0.7, 0.1, 0.05)

    # Rush continuation curve: max(floor, initial * decay ** n)
    rush_continue_initial: float = 0.8
    rush_continue_decay: float = 0.9
    rush_continue_floor: float = 0.1

    # Slot display
    reel_count: int = 3
    symbols: list[int] = [1, 2, 3, 4, 5, 6, 7]

    # Fixed seed for reproducible sessions (None = secure RNG)
    rng_seed: int | None = None


settings = Settings()


def default_game_config():
    """Build a GameConfig from the current settings."""
    from pachislo.logic.models import (
        BallsConfig,
        GameConfig,
        Probability,
        SlotProbability,
    )
    from pachislo.logic.probability import RushContinueCurve

    return GameConfig(
        balls=BallsConfig(
            init_balls=settings.init_balls,
            incremental_balls=settings.incremental_balls,
            incremental_rush=settings.incremental_rush,
        ),
        probability=Probability(
            normal=SlotProbability.from_tuple(settings.normal_probability),
            rush=SlotProbability.from_tuple(settings.rush_probability),
            rush_continue=SlotProbability.from_tuple(settings.rush_continue_probability),
            rush_continue_fn=RushContinueCurve(
                initial=settings.rush_continue_initial,
                decay=settings.rush_continue_decay,
                floor=settings.rush_continue_floor,
            ),
        ),
    )
