"""Precision constants for StableSwap fixed-point math.

Balances and amounts are 18-decimal fixed-point integers, the amplification
parameter carries 3 implicit decimals (AMP_PRECISION = 1000).
"""

from decimal import ROUND_DOWN, Context

# Fractional digits of scaled balances and amounts (token precision convention)
PRECISION_DIGITS = 18
ONE_18 = 10**PRECISION_DIGITS

# Amplification is stored as floor(A) * AMP_PRECISION
AMP_PRECISION_DIGITS = 3
AMP_PRECISION = 10**AMP_PRECISION_DIGITS

# Newton iterations allowed before declaring non-convergence
MAX_ITERATIONS = 255

# Only two-token pools are supported
N_COINS = 2

# Decimal context for every conversion between decimal and scaled integer.
# 80 significant digits holds any scaled balance exactly and truncation
# matches the solver's round-toward-zero convention.
DECIMAL_CONTEXT = Context(prec=80, rounding=ROUND_DOWN)
