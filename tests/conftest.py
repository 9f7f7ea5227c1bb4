"""Pytest configuration and fixtures."""

from decimal import Decimal

import pytest

from stableswap.pool import StablePool

# Concrete pool used throughout: 100/100 at A=100
BALANCE = Decimal(100)
AMP = Decimal(100)


@pytest.fixture
def balanced_pool() -> StablePool:
    """A 100/100 pool with A=100 and no fee."""
    return StablePool(balance_a=BALANCE, balance_b=BALANCE, amplification=AMP)


@pytest.fixture
def balanced_pool_with_fee() -> StablePool:
    """The calculator's default pool: 100/100, A=100, 0.05% fee."""
    return StablePool(
        balance_a=BALANCE,
        balance_b=BALANCE,
        amplification=AMP,
        swap_fee_percent=Decimal("0.05"),
    )


@pytest.fixture
def imbalanced_pool() -> StablePool:
    """A pool holding twice as much B as A."""
    return StablePool(balance_a=Decimal(100), balance_b=Decimal(200), amplification=AMP)
