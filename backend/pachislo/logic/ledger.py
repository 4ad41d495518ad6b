"""Ball accounting for one game session."""
from pachislo.errors import ErrorCode, PachisloError


class BallLedger:
    """
    Ball counts for the active mode.

    balls is the player's own pool; rush_balls holds balls earned during a
    rush episode until they are settled back into balls.
    """

    def __init__(self, balls: int = 0, rush_balls: int = 0):
        self.balls = _amount(balls)
        self.rush_balls = _amount(rush_balls)

    def credit(self, n: int) -> None:
        self.balls += _amount(n)

    def debit(self, n: int) -> None:
        """Raises INSUFFICIENT_BALLS when n exceeds the balance."""
        n = _amount(n)
        if n > self.balls:
            raise PachisloError(
                ErrorCode.INSUFFICIENT_BALLS,
                f"Cannot debit {n} balls from balance {self.balls}.",
            )
        self.balls -= n

    def credit_rush(self, n: int) -> None:
        self.rush_balls += _amount(n)

    def debit_rush(self, n: int) -> None:
        n = _amount(n)
        if n > self.rush_balls:
            raise PachisloError(
                ErrorCode.INSUFFICIENT_BALLS,
                f"Cannot debit {n} rush balls from balance {self.rush_balls}.",
            )
        self.rush_balls -= n

    def debit_active(self) -> bool:
        """
        Take one ball from the active pool, rush balls first.

        Returns False when both pools are empty.
        """
        if self.rush_balls > 0:
            self.debit_rush(1)
            return True
        if self.balls > 0:
            self.debit(1)
            return True
        return False

    def settle_rush(self) -> int:
        """Move all rush balls into the main pool; returns the amount moved."""
        moved = self.rush_balls
        self.rush_balls = 0
        self.balls += moved
        return moved

    def __repr__(self) -> str:
        return f"BallLedger(balls={self.balls}, rush_balls={self.rush_balls})"


def _amount(n: int) -> int:
    if n < 0:
        raise ValueError(f"Ball amount must be non-negative, got {n}")
    return n
