"""Scaling and fee helpers.

Functions for converting decimal quantities to the solver's fixed-point
integer domain and back, and for applying the swap fee to an output.
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal, InvalidOperation, localcontext

from .constants import AMP_PRECISION, DECIMAL_CONTEXT, PRECISION_DIGITS
from .errors import InvalidFeeError, InvalidPoolState

Numeric = Decimal | int | float | str


def to_decimal(value: Numeric) -> Decimal:
    """Normalise caller input to Decimal.

    Floats go through their shortest repr so 0.1 becomes Decimal("0.1")
    rather than its binary expansion.

    Raises:
        InvalidPoolState: If value is not a number
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidPoolState(f"Expected a number, got {value!r}")
    if isinstance(value, float):
        return Decimal(repr(value))
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidPoolState(f"Expected a number, got {value!r}") from e


def scale_up(value: Numeric, precision_digits: int = PRECISION_DIGITS) -> int:
    """Scale a decimal quantity to a fixed-point integer, truncating toward zero.

    Args:
        value: Decimal quantity (balance, amount)
        precision_digits: Implicit fractional digits of the result

    Returns:
        value * 10^precision_digits as int

    Raises:
        InvalidPoolState: If value is NaN or infinite
    """
    d = to_decimal(value)
    if not d.is_finite():
        raise InvalidPoolState(f"Cannot scale non-finite value {d}")
    with localcontext(DECIMAL_CONTEXT):
        return int(d.scaleb(precision_digits))


def scale_down(value: int, precision_digits: int = PRECISION_DIGITS) -> Decimal:
    """Convert a fixed-point integer back to Decimal.

    Args:
        value: Scaled integer
        precision_digits: Implicit fractional digits of value

    Returns:
        value / 10^precision_digits
    """
    with localcontext(DECIMAL_CONTEXT):
        return Decimal(value).scaleb(-precision_digits)


def scale_amplification(amplification: Numeric) -> int:
    """Convert A to the solver's representation: floor(A) * AMP_PRECISION.

    Raises:
        InvalidPoolState: If A is non-finite or floor(A) < 1
    """
    a = to_decimal(amplification)
    if not a.is_finite():
        raise InvalidPoolState(f"Amplification must be finite, got {a}")
    whole = int(a.to_integral_value(rounding=ROUND_FLOOR))
    if whole < 1:
        raise InvalidPoolState(f"Amplification must be at least 1, got {a}")
    return whole * AMP_PRECISION


def validate_swap_fee(fee: Numeric) -> Decimal:
    """Return fee as Decimal after checking it lies in [0, 1).

    Raises:
        InvalidFeeError: If fee is outside [0, 1) or not finite
    """
    fee_dec = to_decimal(fee)
    if not fee_dec.is_finite() or fee_dec < 0 or fee_dec >= 1:
        raise InvalidFeeError(f"Swap fee must be in range [0, 1), got {fee_dec}")
    return fee_dec


def apply_swap_fee(amount: Decimal, fee: Numeric) -> Decimal:
    """Deduct the swap fee from an output amount: amount * (1 - fee).

    Raises:
        InvalidFeeError: If fee is not in range [0, 1)
    """
    fee_dec = validate_swap_fee(fee)
    with localcontext(DECIMAL_CONTEXT):
        return amount * (1 - fee_dec)
