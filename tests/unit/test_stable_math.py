"""Tests for the StableSwap invariant and balance solvers."""

from decimal import Decimal

import pytest

from stableswap import stable_math
from stableswap.constants import AMP_PRECISION, ONE_18
from stableswap.errors import ConvergenceError, InvalidPoolState
from stableswap.scaling import scale_up
from stableswap.stable_math import (
    calc_out_given_in,
    calculate_invariant,
    get_balance_given_invariant,
)


class TestCalculateInvariant:
    """Tests for stable pool invariant calculation."""

    def test_balanced_pool_is_exactly_the_sum(self) -> None:
        """100/100 at A=100: D is exactly 200."""
        amp = 100 * AMP_PRECISION
        d = calculate_invariant(amp, [100 * ONE_18, 100 * ONE_18])
        assert d == 200 * ONE_18

    def test_balanced_pool_high_amp(self) -> None:
        amp = 5000 * AMP_PRECISION
        d = calculate_invariant(amp, [1_000_000 * ONE_18, 1_000_000 * ONE_18])
        assert 1_999_999 * ONE_18 < d <= 2_000_000 * ONE_18

    def test_asymmetric_balances(self) -> None:
        """D lies between the constant-product and constant-sum values."""
        amp = 200 * AMP_PRECISION
        d = calculate_invariant(amp, [100 * ONE_18, 200 * ONE_18])
        # 2 * sqrt(100 * 200) ~= 282.84
        assert 282 * ONE_18 < d < 300 * ONE_18

    def test_near_balanced_two_tokens(self) -> None:
        """Near-balanced pool converges close to the sum."""
        amp = 100 * AMP_PRECISION
        d = calculate_invariant(amp, [10 * ONE_18, 12 * ONE_18])
        assert 21 * ONE_18 < d < 22 * ONE_18

    def test_extreme_imbalance_converges(self) -> None:
        amp = 5000 * AMP_PRECISION
        balances = [scale_up(Decimal("0.00001")), scale_up(1_200_000)]
        d = calculate_invariant(amp, balances)
        assert 0 < d <= sum(balances)

    def test_higher_amp_moves_toward_sum(self) -> None:
        balances = [100 * ONE_18, 300 * ONE_18]
        d_low = calculate_invariant(1 * AMP_PRECISION, balances)
        d_high = calculate_invariant(10_000 * AMP_PRECISION, balances)
        assert d_low < d_high <= 400 * ONE_18

    def test_empty_pool_returns_zero(self) -> None:
        assert calculate_invariant(100 * AMP_PRECISION, [0, 0]) == 0

    def test_one_zero_balance_raises(self) -> None:
        with pytest.raises(InvalidPoolState):
            calculate_invariant(100 * AMP_PRECISION, [100 * ONE_18, 0])

    def test_negative_balance_raises(self) -> None:
        with pytest.raises(InvalidPoolState):
            calculate_invariant(100 * AMP_PRECISION, [100 * ONE_18, -1])

    def test_zero_amp_raises(self) -> None:
        with pytest.raises(InvalidPoolState):
            calculate_invariant(0, [100 * ONE_18, 100 * ONE_18])

    def test_three_balances_rejected(self) -> None:
        with pytest.raises(ValueError):
            calculate_invariant(100 * AMP_PRECISION, [ONE_18, ONE_18, ONE_18])

    def test_is_deterministic(self) -> None:
        amp = 321 * AMP_PRECISION
        balances = [123_456 * ONE_18 + 789, 98_765 * ONE_18 + 4321]
        assert calculate_invariant(amp, balances) == calculate_invariant(amp, balances)

    @pytest.mark.parametrize("amp", [1, 100, 1_000_000])
    def test_balance_order_does_not_matter(self, amp) -> None:
        """D is the same whichever token is listed first."""
        large, small = scale_up(10**15), scale_up(Decimal("0.000001"))

        assert calculate_invariant(amp * AMP_PRECISION, [large, small]) == calculate_invariant(
            amp * AMP_PRECISION, [small, large]
        )

    def test_does_not_mutate_balances(self) -> None:
        balances = [100 * ONE_18, 150 * ONE_18]
        calculate_invariant(100 * AMP_PRECISION, balances)
        assert balances == [100 * ONE_18, 150 * ONE_18]

    def test_iteration_cap_raises(self, monkeypatch) -> None:
        """Running out of iterations is an error, never a partial result."""
        monkeypatch.setattr(stable_math, "MAX_ITERATIONS", 0)
        with pytest.raises(ConvergenceError) as exc_info:
            calculate_invariant(100 * AMP_PRECISION, [100 * ONE_18, 100 * ONE_18])
        assert exc_info.value.stage == "invariant"


class TestGetBalanceGivenInvariant:
    """Tests for get_balance_given_invariant."""

    def test_recovers_original_balance(self) -> None:
        """Given D and the other balance, recovers the original balance."""
        amp = 100 * AMP_PRECISION
        balances = [100 * ONE_18, 100 * ONE_18]
        d = calculate_invariant(amp, balances)

        for index in (0, 1):
            recovered = get_balance_given_invariant(amp, balances, d, index)
            assert abs(recovered - balances[index]) <= 2

    def test_recovers_asymmetric_balance(self) -> None:
        amp = 5000 * AMP_PRECISION
        balances = [1_000 * ONE_18, 3_000 * ONE_18]
        d = calculate_invariant(amp, balances)

        recovered = get_balance_given_invariant(amp, balances, d, 1)

        assert abs(recovered - balances[1]) <= 10**6

    def test_more_in_means_less_out(self) -> None:
        amp = 100 * AMP_PRECISION
        balances = [100 * ONE_18, 100 * ONE_18]
        d = calculate_invariant(amp, balances)

        after_small = get_balance_given_invariant(amp, [101 * ONE_18, 100 * ONE_18], d, 1)
        after_large = get_balance_given_invariant(amp, [150 * ONE_18, 100 * ONE_18], d, 1)

        assert after_large < after_small < 100 * ONE_18

    @pytest.mark.parametrize("index", [-1, 2, 5])
    def test_index_out_of_range_raises(self, index) -> None:
        with pytest.raises(IndexError):
            get_balance_given_invariant(
                100 * AMP_PRECISION, [100 * ONE_18, 100 * ONE_18], 200 * ONE_18, index
            )

    def test_zero_invariant_raises(self) -> None:
        with pytest.raises(InvalidPoolState):
            get_balance_given_invariant(100 * AMP_PRECISION, [ONE_18, ONE_18], 0, 1)

    def test_iteration_cap_raises(self, monkeypatch) -> None:
        monkeypatch.setattr(stable_math, "MAX_ITERATIONS", 0)
        with pytest.raises(ConvergenceError) as exc_info:
            get_balance_given_invariant(
                100 * AMP_PRECISION, [150 * ONE_18, 100 * ONE_18], 200 * ONE_18, 1
            )
        assert exc_info.value.stage == "balance"


class TestCalcOutGivenIn:
    """Tests for the raw exact-input swap."""

    def test_small_swap_nearly_1_to_1(self) -> None:
        amp = 5000 * AMP_PRECISION
        balances = [1_000_000 * ONE_18, 1_000_000 * ONE_18]

        out = calc_out_given_in(amp, balances, 0, 1, 1000 * ONE_18)

        assert 999 * ONE_18 < out < 1000 * ONE_18

    def test_larger_swap_has_slippage(self) -> None:
        amp = 5000 * AMP_PRECISION
        balances = [100_000 * ONE_18, 100_000 * ONE_18]

        out = calc_out_given_in(amp, balances, 0, 1, 10_000 * ONE_18)

        assert 9_900 * ONE_18 < out < 10_000 * ONE_18

    def test_zero_input_returns_zero(self) -> None:
        """The 1-unit buffer never turns into a negative output."""
        amp = 100 * AMP_PRECISION
        out = calc_out_given_in(amp, [100 * ONE_18, 100 * ONE_18], 0, 1, 0)
        assert out == 0

    def test_supplied_invariant_matches_computed(self) -> None:
        amp = 100 * AMP_PRECISION
        balances = [100 * ONE_18, 120 * ONE_18]
        d = calculate_invariant(amp, balances)

        assert calc_out_given_in(amp, balances, 0, 1, ONE_18, invariant=d) == calc_out_given_in(
            amp, balances, 0, 1, ONE_18
        )

    def test_does_not_mutate_balances(self) -> None:
        balances = [100 * ONE_18, 100 * ONE_18]
        calc_out_given_in(100 * AMP_PRECISION, balances, 0, 1, 10 * ONE_18)
        assert balances == [100 * ONE_18, 100 * ONE_18]

    def test_same_token_raises(self) -> None:
        with pytest.raises(ValueError, match="Cannot swap token with itself"):
            calc_out_given_in(100 * AMP_PRECISION, [ONE_18, ONE_18], 0, 0, ONE_18)

    def test_invalid_index_raises(self) -> None:
        with pytest.raises(IndexError):
            calc_out_given_in(100 * AMP_PRECISION, [ONE_18, ONE_18], 0, 5, ONE_18)
        with pytest.raises(IndexError):
            calc_out_given_in(100 * AMP_PRECISION, [ONE_18, ONE_18], -1, 1, ONE_18)

    @pytest.mark.parametrize("amp", [1, 100, 5000])
    @pytest.mark.parametrize(
        "balance_in,balance_out",
        [
            (Decimal(100), Decimal(100)),
            (Decimal(1), Decimal(1000)),
            (Decimal(1000), Decimal(1)),
            (Decimal("37.5"), Decimal("812.25")),
        ],
    )
    @pytest.mark.parametrize("fraction", [Decimal("0.001"), Decimal("0.1"), Decimal(1), Decimal(5)])
    def test_swap_never_lowers_invariant(self, amp, balance_in, balance_out, fraction) -> None:
        """The pool's D after a swap is never below its D before, minus 1."""
        amp_scaled = amp * AMP_PRECISION
        balances = [scale_up(balance_in), scale_up(balance_out)]
        amount_in = scale_up(balance_in * fraction)
        d = calculate_invariant(amp_scaled, balances)

        out = calc_out_given_in(amp_scaled, balances, 0, 1, amount_in, invariant=d)
        d_after = calculate_invariant(amp_scaled, [balances[0] + amount_in, balances[1] - out])

        assert d_after >= d - 1


class TestConvergenceBound:
    """Both solvers terminate across the realistic parameter range."""

    @pytest.mark.parametrize("amp", [1, 100, 1_000_000])
    @pytest.mark.parametrize(
        "balance_in,balance_out",
        [
            (Decimal("0.000001"), Decimal("0.000001")),
            (Decimal(10**15), Decimal(10**15)),
            (Decimal("0.000001"), Decimal(10**15)),
            (Decimal(10**15), Decimal("0.000001")),
        ],
    )
    def test_converges(self, amp, balance_in, balance_out) -> None:
        amp_scaled = amp * AMP_PRECISION
        balances = [scale_up(balance_in), scale_up(balance_out)]

        d = calculate_invariant(amp_scaled, balances)
        out = calc_out_given_in(amp_scaled, balances, 0, 1, balances[0] // 100, invariant=d)

        assert 0 < d <= sum(balances)
        assert 0 <= out < balances[1]
