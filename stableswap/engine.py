"""Swap quoting engine.

Turns decimal pool parameters and a trade size into a SwapResult by running
the scaled stable math, then applying the fee and deriving price metrics.

Every call is self-contained: validate -> scale -> solve -> derive. Nothing
is cached between calls, so identical inputs always give identical results.
"""

from __future__ import annotations

from decimal import Decimal, localcontext

import structlog

from .constants import DECIMAL_CONTEXT
from .errors import ConvergenceError, InvalidPoolState, StableSwapError
from .pool import ImpactSeverity, StablePool, SwapDirection, SwapResult
from .scaling import (
    Numeric,
    apply_swap_fee,
    scale_amplification,
    scale_down,
    scale_up,
    to_decimal,
    validate_swap_fee,
)
from .stable_math import calc_out_given_in, calculate_invariant

logger = structlog.get_logger()

# Price impact thresholds in percent
LOW_IMPACT_THRESHOLD = Decimal("0.1")
HIGH_IMPACT_THRESHOLD = Decimal("1")


def quote(
    amount_in: Numeric,
    balance_in: Numeric,
    balance_out: Numeric,
    amplification: Numeric,
    fee: Numeric = 0,
) -> SwapResult:
    """Quote an exact-input swap against a two-token stable pool.

    Args:
        amount_in: Input amount (decimal units)
        balance_in: Pool balance of the input token
        balance_out: Pool balance of the output token
        amplification: Raw A parameter
        fee: Swap fee as a fraction in [0, 1)

    Returns:
        SwapResult with the fee-adjusted output, effective price and price
        impact. A non-positive amount_in gives SwapResult.zero().

    Raises:
        InvalidPoolState: If balances are not positive, floor(A) < 1, or any
            input is not a finite number
        InvalidFeeError: If fee is outside [0, 1)
        ConvergenceError: If a Newton solver does not converge
    """
    amount_in_dec = to_decimal(amount_in)
    balance_in_dec = to_decimal(balance_in)
    balance_out_dec = to_decimal(balance_out)
    amp_dec = to_decimal(amplification)

    for name, value in (
        ("amount_in", amount_in_dec),
        ("balance_in", balance_in_dec),
        ("balance_out", balance_out_dec),
        ("amplification", amp_dec),
    ):
        if not value.is_finite():
            raise InvalidPoolState(f"{name} must be finite, got {value}")

    if amount_in_dec <= 0:
        return SwapResult.zero()

    if balance_in_dec <= 0 or balance_out_dec <= 0:
        raise InvalidPoolState("Pool balances must be greater than 0")
    if amp_dec <= 0:
        raise InvalidPoolState(f"Amplification must be greater than 0, got {amp_dec}")

    amp = scale_amplification(amp_dec)
    fee_dec = validate_swap_fee(fee)

    amount_in_scaled = scale_up(amount_in_dec)
    balances = [scale_up(balance_in_dec), scale_up(balance_out_dec)]

    logger.debug(
        "quote_started",
        amount_in=str(amount_in_dec),
        balance_in=str(balance_in_dec),
        balance_out=str(balance_out_dec),
        amplification=str(amp_dec),
        fee=str(fee_dec),
        amount_in_scaled=amount_in_scaled,
        balances_scaled=balances,
        amp_scaled=amp,
    )

    try:
        invariant = calculate_invariant(amp, balances)
        raw_out = calc_out_given_in(amp, balances, 0, 1, amount_in_scaled, invariant=invariant)
    except ConvergenceError as e:
        logger.warning(
            "quote_did_not_converge",
            stage=e.stage,
            amount_in=str(amount_in_dec),
            balance_in=str(balance_in_dec),
            balance_out=str(balance_out_dec),
            amplification=str(amp_dec),
        )
        raise

    amount_out = apply_swap_fee(scale_down(raw_out), fee_dec)
    if amount_out < 0:
        amount_out = Decimal(0)

    with localcontext(DECIMAL_CONTEXT):
        effective_price = amount_out / amount_in_dec
        # A zero output reports no impact rather than -100%
        price_impact = (effective_price - 1) * 100 if amount_out > 0 else Decimal(0)

    result = SwapResult(
        amount_out=amount_out,
        effective_price=effective_price,
        price_impact=price_impact,
    )

    logger.debug(
        "quote_computed",
        invariant=invariant,
        raw_amount_out=raw_out,
        amount_out=str(result.amount_out),
        effective_price=str(result.effective_price),
        price_impact=str(result.price_impact),
    )

    return result


def quote_pool(
    pool: StablePool,
    amount_in: Numeric,
    direction: SwapDirection = SwapDirection.A_TO_B,
) -> SwapResult:
    """Quote a swap on a StablePool in the given direction."""
    balance_in, balance_out = pool.sides(direction)
    return quote(amount_in, balance_in, balance_out, pool.amplification, pool.fee_fraction)


def safe_quote_pool(
    pool: StablePool,
    amount_in: Numeric,
    direction: SwapDirection = SwapDirection.A_TO_B,
) -> SwapResult:
    """Quote a swap, downgrading any StableSwapError to a zero result.

    This is the behaviour interactive callers want: a user mid-way through
    typing pool parameters should see zeros, not a crash.
    """
    try:
        return quote_pool(pool, amount_in, direction)
    except StableSwapError as e:
        logger.warning(
            "quote_failed",
            error=str(e),
            error_type=type(e).__name__,
            direction=direction.value,
        )
        return SwapResult.zero()


def pool_after_swap(
    pool: StablePool,
    direction: SwapDirection,
    amount_in: Numeric,
    amount_out: Numeric,
) -> StablePool:
    """Pool state after a quoted swap.

    The input side grows by the fee-adjusted input and the output side
    shrinks by the quoted output.
    """
    balance_in, balance_out = pool.sides(direction)
    with localcontext(DECIMAL_CONTEXT):
        new_in = balance_in + to_decimal(amount_in) * (1 - pool.fee_fraction)
        new_out = balance_out - to_decimal(amount_out)
    return pool.with_sides(direction, new_in, new_out)


def classify_price_impact(price_impact: Numeric) -> ImpactSeverity:
    """Bucket a signed price impact percentage for display."""
    impact = to_decimal(price_impact)
    magnitude = abs(impact)
    if magnitude < LOW_IMPACT_THRESHOLD:
        return ImpactSeverity.LOW
    if impact > 0:
        return ImpactSeverity.FAVORABLE
    if magnitude < HIGH_IMPACT_THRESHOLD:
        return ImpactSeverity.MODERATE
    return ImpactSeverity.HIGH
