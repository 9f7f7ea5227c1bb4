"""StableSwap invariant and balance solvers.

Core math for two-token stable (StableSwap/Curve-style) pools, following
Balancer's StableMath conventions:
- balances are 18-decimal fixed-point integers
- the amplification parameter is pre-multiplied by AMP_PRECISION (1000)
- A*n (not A*n^n) is used in the Newton formulas; the n^n factor enters
  through the d_p and p_d products

IMPORTANT: The rounding directions below are part of the contract. Truncating
division where the invariant is computed, round-up division where a balance
is solved, and the 1-unit buffer on outputs all bias results in the pool's
favour. Do not "simplify" them.
"""

from collections.abc import Sequence

from .constants import AMP_PRECISION, MAX_ITERATIONS, N_COINS
from .errors import ConvergenceError, InvalidPoolState
from .safe_int import S


def _check_balances(balances: Sequence[int]) -> None:
    if len(balances) != N_COINS:
        raise ValueError(f"Expected {N_COINS} balances, got {len(balances)}")
    for i, bal in enumerate(balances):
        if bal < 0:
            raise InvalidPoolState(f"Balance at index {i} must be non-negative, got {bal}")


def calculate_invariant(amp: int, balances: Sequence[int]) -> int:
    """Calculate the StableSwap invariant D using Newton iteration.

    Algorithm:
        1. Initial guess: D = sum(balances)
        2. Iterate until |D_new - D_old| <= 1
        3. Max iterations: MAX_ITERATIONS

    The +-1 tolerance absorbs the noise of truncating division; a tighter
    tolerance can cycle forever between two neighbouring integers.

    Args:
        amp: Amplification parameter (scaled by AMP_PRECISION=1000)
        balances: Two token balances (scaled to 18 decimals)

    Returns:
        The invariant D (scaled to 18 decimals). Zero for an empty pool.

    Raises:
        InvalidPoolState: If amp is not positive, a balance is negative, or
            exactly one balance is zero
        ConvergenceError: If the iteration does not converge (stage "invariant")
    """
    _check_balances(balances)
    if amp <= 0:
        raise InvalidPoolState(f"Amplification must be positive, got {amp}")

    sum_balances = S(sum(balances))
    if sum_balances == 0:
        return 0

    for i, bal in enumerate(balances):
        if bal == 0:
            raise InvalidPoolState(f"Balance at index {i} must be positive")

    n_coins = S(N_COINS)
    amp_times_total = S(amp) * n_coins
    balance_product = n_coins * n_coins * balances[0] * balances[1]
    invariant = sum_balances

    for _ in range(MAX_ITERATIONS):
        # d_p = D^3 / (4 * b0 * b1), truncated once
        d_p = (invariant * invariant * invariant) // balance_product

        prev_invariant = invariant

        numerator = ((amp_times_total * sum_balances) // AMP_PRECISION + d_p * n_coins) * invariant
        denominator = ((amp_times_total - AMP_PRECISION) * invariant) // AMP_PRECISION + (
            n_coins + 1
        ) * d_p
        invariant = numerator // denominator

        if invariant.abs_diff(prev_invariant) <= 1:
            return invariant.value

    raise ConvergenceError(
        "invariant", f"no convergence after {MAX_ITERATIONS} iterations"
    )


def get_balance_given_invariant(
    amp: int,
    balances: Sequence[int],
    invariant: int,
    token_index: int,
) -> int:
    """Solve for balances[token_index] given D and the other balance.

    Newton iteration on y^2 + (b - D) y = c. The current value at
    token_index is not an input to the answer (it cancels between p_d and
    c) but it is used in the intermediate products exactly as Balancer does.

    Args:
        amp: Amplification parameter (scaled by AMP_PRECISION=1000)
        balances: Two token balances (18 decimals)
        invariant: The invariant D to preserve
        token_index: Index of the balance to solve for (0 or 1)

    Returns:
        The balance at token_index that keeps the invariant at D

    Raises:
        IndexError: If token_index is out of range
        InvalidPoolState: If invariant, amp or the balance product is zero
        ConvergenceError: If the iteration does not converge (stage "balance")
    """
    _check_balances(balances)
    if token_index < 0 or token_index >= N_COINS:
        raise IndexError(f"token_index {token_index} out of range for {N_COINS} tokens")
    if amp <= 0:
        raise InvalidPoolState(f"Amplification must be positive, got {amp}")
    if invariant <= 0:
        raise InvalidPoolState(f"Invariant must be positive, got {invariant}")

    n_coins = S(N_COINS)
    d = S(invariant)
    amp_times_total = S(amp) * n_coins

    # p_d = balance[0] * n, then p_d = p_d * balance[j] * n / D
    sum_balances = S(balances[0])
    p_d = S(balances[0]) * n_coins
    for j in range(1, N_COINS):
        p_d = (p_d * balances[j] * n_coins) // d
        sum_balances = sum_balances + balances[j]

    if p_d == 0:
        raise InvalidPoolState("Balance product is zero")

    sum_others = sum_balances - balances[token_index]
    inv2 = d * d

    # Round-up here keeps the solved balance from coming out too small
    c = (inv2 * AMP_PRECISION).ceiling_div(amp_times_total * p_d) * balances[token_index]
    b = sum_others + (d * AMP_PRECISION) // amp_times_total

    token_balance = (inv2 + c).ceiling_div(d + b)

    for _ in range(MAX_ITERATIONS):
        prev_token_balance = token_balance

        # y = (y^2 + c) / (2y + b - D), rounded up
        denominator = token_balance * 2 + b
        if denominator <= d:
            raise ConvergenceError("balance", "Newton denominator became non-positive")
        token_balance = (token_balance * token_balance + c).ceiling_div(denominator - d)

        if token_balance.abs_diff(prev_token_balance) <= 1:
            return token_balance.value

    raise ConvergenceError("balance", f"no convergence after {MAX_ITERATIONS} iterations")


def calc_out_given_in(
    amp: int,
    balances: Sequence[int],
    token_index_in: int,
    token_index_out: int,
    amount_in: int,
    invariant: int | None = None,
) -> int:
    """Calculate the raw (pre-fee) output for an exact input.

    Algorithm:
        1. Calculate current invariant D (unless supplied)
        2. Add amount_in to a copy of balances[token_index_in]
        3. Solve for the new balances[token_index_out] given D
        4. Return: old_balance_out - new_balance_out - 1

    Args:
        amp: Amplification parameter (scaled by AMP_PRECISION=1000)
        balances: Two token balances (18 decimals); not modified
        token_index_in: Index of input token
        token_index_out: Index of output token
        amount_in: Scaled input amount
        invariant: Pre-computed D for balances, if the caller already has it

    Returns:
        Scaled output amount, 0 if the buffer exceeds the output

    Raises:
        ValueError: If token_index_in == token_index_out
        IndexError: If token indices are out of range
        ConvergenceError: If either solver does not converge
    """
    for index in (token_index_in, token_index_out):
        if index < 0 or index >= N_COINS:
            raise IndexError(f"token index {index} out of range for {N_COINS} tokens")
    if token_index_in == token_index_out:
        raise ValueError("Cannot swap token with itself")

    if invariant is None:
        invariant = calculate_invariant(amp, balances)

    new_balances = list(balances)
    new_balances[token_index_in] = balances[token_index_in] + amount_in

    final_balance_out = get_balance_given_invariant(amp, new_balances, invariant, token_index_out)

    # 1 unit rounding buffer in the pool's favour
    amount_out = balances[token_index_out] - final_balance_out - 1
    if amount_out < 0:
        return 0
    return amount_out
