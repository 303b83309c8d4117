"""
Constant-product curve kernel (v1 semantics).

Integer-only pure functions for proportional liquidity sizing and fee-first
exact-in swaps:
- Amounts, reserves and supplies are u64 quantities.
- Intermediate products must fit in u128.
- Every division carries an explicit rounding rule; rounding always favours
  the pool, never the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ...errors import ArithmeticOverflow, DivisionByZero, InvalidAmount, InvalidComputation, InvalidFee


BPS_DENOM = 10_000
PRECISION = 6

U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def check_u64(name: str, value: int) -> int:
    _require_int(name, value)
    if value < 0:
        raise InvalidAmount(f"{name} must be non-negative: {value}")
    if value > U64_MAX:
        raise ArithmeticOverflow(f"{name} exceeds u64: {value}")
    return value


def _checked_mul(a: int, b: int) -> int:
    product = a * b
    if product > U128_MAX:
        raise ArithmeticOverflow(f"intermediate product exceeds u128: {a} * {b}")
    return product


def _checked_u64(name: str, value: int) -> int:
    if value > U64_MAX:
        raise ArithmeticOverflow(f"{name} exceeds u64: {value}")
    return value


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def _require_fee_bps(fee_bps: int) -> int:
    _require_int("fee_bps", fee_bps)
    if not (0 <= fee_bps <= BPS_DENOM):
        raise InvalidFee(f"fee_bps must be in [0, {BPS_DENOM}]: {fee_bps}")
    return fee_bps


@dataclass(frozen=True)
class SwapQuote:
    amount_in: int
    effective_in: int
    fee_amount: int
    amount_out: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def _proportional(reserve_x: int, reserve_y: int, lp_supply: int, shares: int) -> Tuple[int, int]:
    x = _checked_mul(shares, reserve_x) // lp_supply
    y = _checked_mul(shares, reserve_y) // lp_supply
    return _checked_u64("x", x), _checked_u64("y", y)


def deposit_amounts_for_shares(
    reserve_x: int,
    reserve_y: int,
    lp_supply: int,
    shares_requested: int,
) -> Tuple[int, int]:
    """
    Amounts of X and Y backing `shares_requested` new shares.

        x = floor(shares_requested * reserve_x / lp_supply)
        y = floor(shares_requested * reserve_y / lp_supply)

    Only valid for a pool that already has liquidity; the bootstrap deposit
    sets the price directly and must not reach this function.
    """
    for name, v in (
        ("reserve_x", reserve_x),
        ("reserve_y", reserve_y),
        ("lp_supply", lp_supply),
        ("shares_requested", shares_requested),
    ):
        check_u64(name, v)

    if lp_supply == 0:
        raise InvalidComputation("deposit sizing requires existing liquidity (lp_supply == 0)")

    return _proportional(reserve_x, reserve_y, lp_supply, shares_requested)


def withdraw_amounts_for_shares(
    reserve_x: int,
    reserve_y: int,
    lp_supply: int,
    shares_burned: int,
) -> Tuple[int, int]:
    """
    Amounts of X and Y released by burning `shares_burned` shares (floor).

    Burning more than the outstanding supply is not rejected here; the burn
    itself fails at the ledger.
    """
    for name, v in (
        ("reserve_x", reserve_x),
        ("reserve_y", reserve_y),
        ("lp_supply", lp_supply),
        ("shares_burned", shares_burned),
    ):
        check_u64(name, v)

    if lp_supply == 0:
        raise DivisionByZero("cannot withdraw from a pool with no liquidity")

    return _proportional(reserve_x, reserve_y, lp_supply, shares_burned)


def effective_input(amount_in: int, fee_bps: int) -> int:
    """`floor(amount_in * (10000 - fee_bps) / 10000)`."""
    check_u64("amount_in", amount_in)
    _require_fee_bps(fee_bps)
    return _checked_mul(amount_in, BPS_DENOM - fee_bps) // BPS_DENOM


def swap_exact_in(
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int,
) -> SwapQuote:
    """
    Exact-in swap quote + post-state.

    The fee is taken from the input before pricing:

        effective_in = floor(amount_in * (10000 - fee_bps) / 10000)
        retained     = ceil(reserve_in * reserve_out / (reserve_in + effective_in))
        amount_out   = reserve_out - retained

    `retained >= 1` whenever both reserves are non-empty, so the output
    reserve can never be drained. The whole `amount_in` (fee included) lands in
    the input vault.
    """
    for name, v in (
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("amount_in", amount_in),
    ):
        check_u64(name, v)
    _require_fee_bps(fee_bps)

    if amount_in == 0:
        raise InvalidAmount("amount_in must be non-zero")
    if reserve_in == 0 or reserve_out == 0:
        raise DivisionByZero("cannot swap against an empty reserve")

    effective_in = effective_input(amount_in, fee_bps)
    k_before = _checked_mul(reserve_in, reserve_out)
    retained = _ceil_div(k_before, reserve_in + effective_in)
    amount_out = reserve_out - retained

    new_reserve_in = _checked_u64("new_reserve_in", reserve_in + amount_in)
    new_reserve_out = reserve_out - amount_out
    k_after = _checked_mul(new_reserve_in, new_reserve_out)

    if not (0 <= amount_out < reserve_out):
        raise InvalidComputation(f"amount_out out of range: {amount_out} (reserve_out={reserve_out})")
    if k_after < k_before:
        raise InvalidComputation(f"invariant violation: k_after ({k_after}) < k_before ({k_before})")

    return SwapQuote(
        amount_in=amount_in,
        effective_in=effective_in,
        fee_amount=amount_in - effective_in,
        amount_out=amount_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )


def swap_output(reserve_in: int, reserve_out: int, amount_in: int, fee_bps: int) -> int:
    """Output amount of an exact-in swap (see `swap_exact_in`)."""
    return swap_exact_in(reserve_in, reserve_out, amount_in, fee_bps).amount_out


def spot_price(reserve_base: int, reserve_quote: int, precision: int = PRECISION) -> int:
    """
    Marginal price of one base unit in quote units, scaled by 10**precision (floor).
    """
    check_u64("reserve_base", reserve_base)
    check_u64("reserve_quote", reserve_quote)
    _require_int("precision", precision)
    if not (0 <= precision <= 18):
        raise InvalidComputation(f"precision must be in [0, 18]: {precision}")
    if reserve_base == 0:
        raise DivisionByZero("spot price of an empty base reserve")
    return _checked_mul(reserve_quote, 10**precision) // reserve_base
