"""Price-impact profile and bonding-curve geometry.

Both collaborators sit on top of the one shared solver: the impact profile
calls the quoting engine once per trade size, and the curves hold the pool's
18-decimal invariant fixed while solving for y along a range of x.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, localcontext

import structlog

from .config import DEFAULT_CHART_CONFIG, ChartConfig
from .constants import DECIMAL_CONTEXT
from .engine import classify_price_impact, quote_pool
from .errors import StableSwapError
from .pool import ImpactSeverity, StablePool, SwapDirection
from .scaling import Numeric, scale_amplification, scale_down, scale_up
from .stable_math import calculate_invariant, get_balance_given_invariant

logger = structlog.get_logger()


@dataclass(frozen=True)
class ImpactPoint:
    """One bar of the price-impact profile.

    Attributes:
        size_fraction: Trade size as a fraction of total liquidity
        amount_in: Trade size in input-token units
        amount_out: Quoted output after fee
        price_impact: Signed percentage impact
        severity: Display bucket for price_impact
        pool_after: Pool with amount_in added and amount_out removed
        share_a_percent: Token A share of the post-trade total
        share_b_percent: Token B share of the post-trade total
    """

    size_fraction: Decimal
    amount_in: Decimal
    amount_out: Decimal
    price_impact: Decimal
    severity: ImpactSeverity
    pool_after: StablePool
    share_a_percent: Decimal
    share_b_percent: Decimal

    @property
    def label(self) -> str:
        """Trade size as a percentage label, e.g. "0.5%"."""
        return f"{(self.size_fraction * 100).normalize():f}%"


@dataclass(frozen=True)
class CurvePoint:
    x: Decimal
    y: Decimal


@dataclass(frozen=True)
class BondingCurve:
    """Constant-invariant curve for one amplification value."""

    amplification: int
    points: tuple[CurvePoint, ...]


def price_impact_profile(
    pool: StablePool,
    direction: SwapDirection = SwapDirection.A_TO_B,
    config: ChartConfig = DEFAULT_CHART_CONFIG,
) -> list[ImpactPoint | None]:
    """Quote each configured trade size against the pool.

    Each quote is independent of the others. A size whose quote fails is
    returned as None in its slot so the output lines up with
    config.trade_sizes.
    """
    balance_in, balance_out = pool.sides(direction)
    total = pool.total_liquidity
    profile: list[ImpactPoint | None] = []

    for size in config.trade_sizes:
        with localcontext(DECIMAL_CONTEXT):
            amount_in = total * size
        try:
            result = quote_pool(pool, amount_in, direction)
        except StableSwapError as e:
            logger.warning(
                "impact_point_failed",
                size_fraction=str(size),
                error=str(e),
                error_type=type(e).__name__,
            )
            profile.append(None)
            continue

        with localcontext(DECIMAL_CONTEXT):
            pool_after = pool.with_sides(
                direction, balance_in + amount_in, balance_out - result.amount_out
            )
            new_total = pool_after.total_liquidity
            share_a = pool_after.balance_a / new_total * 100
            share_b = pool_after.balance_b / new_total * 100

        profile.append(
            ImpactPoint(
                size_fraction=size,
                amount_in=amount_in,
                amount_out=result.amount_out,
                price_impact=result.price_impact,
                severity=classify_price_impact(result.price_impact),
                pool_after=pool_after,
                share_a_percent=share_a,
                share_b_percent=share_b,
            )
        )

    return profile


def pool_invariant(pool: StablePool) -> int:
    """Scaled invariant D of the pool's current balances and amplification."""
    amp = scale_amplification(pool.amplification)
    return calculate_invariant(amp, [scale_up(pool.balance_a), scale_up(pool.balance_b)])


def curve_point(x: Numeric, invariant: int, amplification: Numeric) -> Decimal:
    """Solve y on the curve of the given scaled invariant at a decimal x.

    The unknown side's placeholder balance is set to x; it cancels out of
    the solution.

    Raises:
        StableSwapError: If the balance solver rejects or fails on the input
    """
    amp = scale_amplification(amplification)
    x_scaled = scale_up(x)
    y_scaled = get_balance_given_invariant(amp, [x_scaled, x_scaled], invariant, 1)
    return scale_down(y_scaled)


def bonding_curves(
    pool: StablePool,
    config: ChartConfig = DEFAULT_CHART_CONFIG,
) -> list[BondingCurve]:
    """Curves for each configured A, all through the pool's current invariant.

    D is computed once from the pool's own amplification and balances, then
    reused for every point of every curve.
    """
    invariant = pool_invariant(pool)

    with localcontext(DECIMAL_CONTEXT):
        max_value = pool.total_liquidity * config.range_multiplier
        min_x = max_value * config.start_fraction
        step = (max_value - min_x) / config.curve_points
        y_limit = max_value * config.max_y_multiplier

    curves = []
    for amplification in config.curve_amplifications:
        points = []
        for i in range(config.curve_points + 1):
            with localcontext(DECIMAL_CONTEXT):
                x = min_x + step * i
            try:
                y = curve_point(x, invariant, amplification)
            except StableSwapError as e:
                logger.debug(
                    "curve_point_skipped",
                    amplification=amplification,
                    x=str(x),
                    error=str(e),
                )
                continue
            if 0 < y < y_limit:
                points.append(CurvePoint(x=x, y=y))

        logger.debug(
            "bonding_curve_computed",
            amplification=amplification,
            invariant=invariant,
            point_count=len(points),
        )
        curves.append(BondingCurve(amplification=amplification, points=tuple(points)))

    return curves
