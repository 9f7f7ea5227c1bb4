"""Chart and profile configuration for the calculator."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ChartConfig:
    """Centralized configuration for the price-impact and curve collaborators.

    Attributes:
        trade_sizes: Trade sizes for the impact profile, as fractions of the
            pool's total liquidity (default: 0.5%, 1%, 2%, 3%, 4%, 5%)
        curve_amplifications: A values to draw bonding curves for, all
            sharing the current pool's invariant
        curve_points: Number of steps per curve (curve_points + 1 samples)
        range_multiplier: Plot range as a multiple of total liquidity
        start_fraction: First x sample as a fraction of the plot range
        max_y_multiplier: Points with y above max_y_multiplier * range are dropped
    """

    trade_sizes: tuple[Decimal, ...] = (
        Decimal("0.005"),
        Decimal("0.01"),
        Decimal("0.02"),
        Decimal("0.03"),
        Decimal("0.04"),
        Decimal("0.05"),
    )
    curve_amplifications: tuple[int, ...] = (50, 200, 500, 1000, 5000)
    curve_points: int = 200
    range_multiplier: Decimal = Decimal("1.5")
    start_fraction: Decimal = Decimal("0.01")
    max_y_multiplier: Decimal = Decimal("3")


# Default configuration instance
DEFAULT_CHART_CONFIG = ChartConfig()
