"""API endpoints for the StableSwap calculator."""

import asyncio
from decimal import Decimal

import structlog
from fastapi import APIRouter

from stableswap.charts import bonding_curves, price_impact_profile
from stableswap.engine import classify_price_impact, pool_after_swap, quote_pool
from stableswap.errors import StableSwapError
from stableswap.pool import ImpactSeverity

from .schemas import (
    CurveModel,
    CurvesRequest,
    CurvesResponse,
    ImpactPointModel,
    PoolParams,
    ProfileRequest,
    ProfileResponse,
    QuoteRequest,
    QuoteResponse,
)

logger = structlog.get_logger()

router = APIRouter()


@router.post("/quote", response_model_exclude_none=True)
async def quote(request: QuoteRequest) -> QuoteResponse:
    """Quote an exact-input swap.

    Error Handling:
        - Invalid request schema: Returns 422 Validation Error (Pydantic)
        - Invalid pool parameters or solver non-convergence: Returns a zero
          quote with `error` set, so the caller can keep rendering
    """
    pool = request.pool.to_pool()
    loop = asyncio.get_running_loop()

    try:
        result = await loop.run_in_executor(
            None, quote_pool, pool, request.amount_in, request.direction
        )
    except StableSwapError as e:
        logger.warning(
            "quote_rejected",
            error=str(e),
            error_type=type(e).__name__,
            amount_in=str(request.amount_in),
            direction=request.direction.value,
        )
        return QuoteResponse(
            direction=request.direction,
            amount_in=Decimal(0),
            amount_out=Decimal(0),
            effective_price=Decimal(0),
            price_impact=Decimal(0),
            severity=ImpactSeverity.LOW,
            error=str(e),
        )

    pool_after = None
    if request.amount_in > 0:
        pool_after = PoolParams.from_pool(
            pool_after_swap(pool, request.direction, request.amount_in, result.amount_out)
        )

    return QuoteResponse(
        direction=request.direction,
        amount_in=max(request.amount_in, Decimal(0)),
        amount_out=result.amount_out,
        effective_price=result.effective_price,
        price_impact=result.price_impact,
        severity=classify_price_impact(result.price_impact),
        pool_after=pool_after,
    )


@router.post("/price-impact")
async def price_impact(request: ProfileRequest) -> ProfileResponse:
    """Price impact for each configured trade size.

    Sizes that cannot be quoted come back as null entries.
    """
    pool = request.pool.to_pool()
    loop = asyncio.get_running_loop()
    profile = await loop.run_in_executor(None, price_impact_profile, pool, request.direction)

    return ProfileResponse(
        total_liquidity=pool.total_liquidity,
        points=[ImpactPointModel.from_point(p) if p is not None else None for p in profile],
    )


@router.post("/curves", response_model_exclude_none=True)
async def curves(request: CurvesRequest) -> CurvesResponse:
    """Bonding curves through the pool's current invariant."""
    pool = request.pool.to_pool()
    current = (pool.balance_a, pool.balance_b)
    loop = asyncio.get_running_loop()

    try:
        result = await loop.run_in_executor(None, bonding_curves, pool)
    except StableSwapError as e:
        logger.warning(
            "curves_rejected",
            error=str(e),
            error_type=type(e).__name__,
        )
        return CurvesResponse(current=current, curves=[], error=str(e))

    return CurvesResponse(
        current=current,
        curves=[CurveModel.from_curve(c) for c in result],
    )
