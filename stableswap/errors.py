"""StableSwap error classes."""


class StableSwapError(Exception):
    """Base error for StableSwap calculations."""

    pass


class InvalidPoolState(StableSwapError):
    """Pool balances and amplification must be positive and finite."""

    pass


class InvalidFeeError(InvalidPoolState):
    """Swap fee must be in range [0, 1)."""

    pass


class ConvergenceError(StableSwapError):
    """Newton iteration did not converge within MAX_ITERATIONS.

    Attributes:
        stage: Which solver failed, "invariant" or "balance"
    """

    def __init__(self, stage: str, detail: str | None = None) -> None:
        self.stage = stage
        message = f"Stable {stage} did not converge"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
