"""Pydantic request and response models for the calculator API.

Field names follow the calculator form's camelCase names; Python
attributes stay snake_case.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

from stableswap.charts import BondingCurve, ImpactPoint
from stableswap.pool import ImpactSeverity, StablePool, SwapDirection

# Decimals are sent as plain (non-exponent) strings
DecimalStr = Annotated[Decimal, PlainSerializer(lambda d: format(d, "f"), return_type=str)]


class PoolParams(BaseModel):
    """Pool parameters as entered by the user."""

    balance_a: DecimalStr = Field(alias="balanceA")
    balance_b: DecimalStr = Field(alias="balanceB")
    amplification: DecimalStr = Field(alias="amplificationFactor")
    swap_fee_percent: DecimalStr = Field(
        default=Decimal(0),
        alias="swapFee",
        description="Swap fee as a percentage, e.g. 0.05 for 0.05%.",
    )

    model_config = {"populate_by_name": True}

    def to_pool(self) -> StablePool:
        return StablePool(
            balance_a=self.balance_a,
            balance_b=self.balance_b,
            amplification=self.amplification,
            swap_fee_percent=self.swap_fee_percent,
        )

    @classmethod
    def from_pool(cls, pool: StablePool) -> "PoolParams":
        return cls(
            balance_a=pool.balance_a,
            balance_b=pool.balance_b,
            amplification=pool.amplification,
            swap_fee_percent=pool.swap_fee_percent,
        )


class QuoteRequest(BaseModel):
    pool: PoolParams
    amount_in: DecimalStr = Field(alias="amountIn")
    direction: SwapDirection = SwapDirection.A_TO_B

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    """Swap quote. On failure every number is zero and error is set."""

    direction: SwapDirection
    amount_in: DecimalStr = Field(alias="amountIn")
    amount_out: DecimalStr = Field(alias="amountOut")
    effective_price: DecimalStr = Field(alias="effectivePrice")
    price_impact: DecimalStr = Field(alias="priceImpact")
    severity: ImpactSeverity
    pool_after: PoolParams | None = Field(default=None, alias="poolAfter")
    error: str | None = None

    model_config = {"populate_by_name": True}


class ProfileRequest(BaseModel):
    pool: PoolParams
    direction: SwapDirection = SwapDirection.A_TO_B


class ImpactPointModel(BaseModel):
    label: str
    size_fraction: DecimalStr = Field(alias="sizeFraction")
    amount_in: DecimalStr = Field(alias="amountIn")
    amount_out: DecimalStr = Field(alias="amountOut")
    price_impact: DecimalStr = Field(alias="priceImpact")
    severity: ImpactSeverity
    pool_after: PoolParams = Field(alias="poolAfter")
    share_a_percent: DecimalStr = Field(alias="shareAPercent")
    share_b_percent: DecimalStr = Field(alias="shareBPercent")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_point(cls, point: ImpactPoint) -> "ImpactPointModel":
        return cls(
            label=point.label,
            size_fraction=point.size_fraction,
            amount_in=point.amount_in,
            amount_out=point.amount_out,
            price_impact=point.price_impact,
            severity=point.severity,
            pool_after=PoolParams.from_pool(point.pool_after),
            share_a_percent=point.share_a_percent,
            share_b_percent=point.share_b_percent,
        )


class ProfileResponse(BaseModel):
    total_liquidity: DecimalStr = Field(alias="totalLiquidity")
    points: list[ImpactPointModel | None]
    error: str | None = None

    model_config = {"populate_by_name": True}


class CurvesRequest(BaseModel):
    pool: PoolParams


class CurveModel(BaseModel):
    amplification: int
    points: list[tuple[DecimalStr, DecimalStr]]

    @classmethod
    def from_curve(cls, curve: BondingCurve) -> "CurveModel":
        return cls(
            amplification=curve.amplification,
            points=[(p.x, p.y) for p in curve.points],
        )


class CurvesResponse(BaseModel):
    current: tuple[DecimalStr, DecimalStr]
    curves: list[CurveModel]
    error: str | None = None
