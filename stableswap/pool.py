"""Pool and swap result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from .scaling import to_decimal


class SwapDirection(str, Enum):
    """Which pool side the trader sells into."""

    A_TO_B = "AtoB"
    B_TO_A = "BtoA"


class ImpactSeverity(str, Enum):
    """Display bucket for a price impact percentage."""

    LOW = "low"
    FAVORABLE = "favorable"
    MODERATE = "moderate"
    HIGH = "high"


@dataclass(frozen=True)
class StablePool:
    """Two-token stable pool as entered by a user.

    Attributes:
        balance_a: Token A balance (decimal units)
        balance_b: Token B balance (decimal units)
        amplification: Raw A parameter (e.g., 100). The solver uses
            floor(A) * AMP_PRECISION internally.
        swap_fee_percent: Fee as a percentage (e.g., 0.05 for 0.05%)
    """

    balance_a: Decimal
    balance_b: Decimal
    amplification: Decimal
    swap_fee_percent: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        # Accept ints, floats and numeric strings; store Decimals
        for name in ("balance_a", "balance_b", "amplification", "swap_fee_percent"):
            object.__setattr__(self, name, to_decimal(getattr(self, name)))

    @property
    def fee_fraction(self) -> Decimal:
        """Swap fee as a fraction in [0, 1)."""
        return self.swap_fee_percent / 100

    @property
    def total_liquidity(self) -> Decimal:
        return self.balance_a + self.balance_b

    def sides(self, direction: SwapDirection) -> tuple[Decimal, Decimal]:
        """Return (balance_in, balance_out) for a swap direction."""
        if direction == SwapDirection.A_TO_B:
            return self.balance_a, self.balance_b
        return self.balance_b, self.balance_a

    def with_sides(
        self, direction: SwapDirection, balance_in: Decimal, balance_out: Decimal
    ) -> StablePool:
        """Return a copy with the in/out balances mapped back onto A and B."""
        if direction == SwapDirection.A_TO_B:
            balance_a, balance_b = balance_in, balance_out
        else:
            balance_a, balance_b = balance_out, balance_in
        return StablePool(
            balance_a=balance_a,
            balance_b=balance_b,
            amplification=self.amplification,
            swap_fee_percent=self.swap_fee_percent,
        )


@dataclass(frozen=True)
class SwapResult:
    """Result of a swap quote.

    Attributes:
        amount_out: Output after the fee, in decimal units
        effective_price: amount_out / amount_in
        price_impact: Signed percentage deviation from a 1:1 rate. Positive
            means the trader receives more than 1:1.
    """

    amount_out: Decimal
    effective_price: Decimal
    price_impact: Decimal

    @classmethod
    def zero(cls) -> SwapResult:
        """Result for an empty or failed quote."""
        return cls(
            amount_out=Decimal(0),
            effective_price=Decimal(0),
            price_impact=Decimal(0),
        )

    @property
    def is_zero(self) -> bool:
        return self.amount_out == 0
