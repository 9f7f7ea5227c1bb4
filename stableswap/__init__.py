"""StableSwap calculator - fixed-point solver for two-token stable pools.

The entry point is quote(); calculate_invariant() and
get_balance_given_invariant() are exposed for curve plotting.
"""

from stableswap.charts import (
    BondingCurve,
    CurvePoint,
    ImpactPoint,
    bonding_curves,
    curve_point,
    pool_invariant,
    price_impact_profile,
)
from stableswap.config import DEFAULT_CHART_CONFIG, ChartConfig
from stableswap.engine import (
    classify_price_impact,
    pool_after_swap,
    quote,
    quote_pool,
    safe_quote_pool,
)
from stableswap.errors import (
    ConvergenceError,
    InvalidFeeError,
    InvalidPoolState,
    StableSwapError,
)
from stableswap.pool import ImpactSeverity, StablePool, SwapDirection, SwapResult
from stableswap.scaling import scale_amplification, scale_down, scale_up
from stableswap.stable_math import (
    calc_out_given_in,
    calculate_invariant,
    get_balance_given_invariant,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Engine
    "quote",
    "quote_pool",
    "safe_quote_pool",
    "pool_after_swap",
    "classify_price_impact",
    # Stable math
    "calculate_invariant",
    "get_balance_given_invariant",
    "calc_out_given_in",
    # Scaling
    "scale_up",
    "scale_down",
    "scale_amplification",
    # Charts
    "price_impact_profile",
    "bonding_curves",
    "curve_point",
    "pool_invariant",
    "ImpactPoint",
    "BondingCurve",
    "CurvePoint",
    "ChartConfig",
    "DEFAULT_CHART_CONFIG",
    # Types
    "StablePool",
    "SwapDirection",
    "SwapResult",
    "ImpactSeverity",
    # Errors
    "StableSwapError",
    "InvalidPoolState",
    "InvalidFeeError",
    "ConvergenceError",
]
