"""Property tests for the curve kernel (rounding direction and invariants)."""

from __future__ import annotations

import importlib.util

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import assume, given, settings

from cpamm.kernels.python.cp_curve_v1 import (
    deposit_amounts_for_shares,
    swap_exact_in,
    swap_output,
    withdraw_amounts_for_shares,
)

reserves = st.integers(min_value=1, max_value=10**15)
amounts = st.integers(min_value=1, max_value=10**15)
fees = st.integers(min_value=0, max_value=10_000)
# Keeps shares * reserve / supply inside u64.
liquidity = st.integers(min_value=1, max_value=10**9)


@settings(max_examples=300, deadline=None)
@given(reserve_in=reserves, reserve_out=reserves, a=amounts, b=amounts, fee_bps=fees)
def test_swap_output_monotone_and_bounded(reserve_in: int, reserve_out: int, a: int, b: int, fee_bps: int) -> None:
    lo, hi = min(a, b), max(a, b)
    out_lo = swap_output(reserve_in, reserve_out, lo, fee_bps)
    out_hi = swap_output(reserve_in, reserve_out, hi, fee_bps)
    assert 0 <= out_lo <= out_hi < reserve_out


@settings(max_examples=300, deadline=None)
@given(reserve_in=reserves, reserve_out=reserves, amount_in=amounts, fee_bps=st.integers(min_value=1, max_value=10_000))
def test_fee_swaps_never_decrease_product(reserve_in: int, reserve_out: int, amount_in: int, fee_bps: int) -> None:
    q = swap_exact_in(reserve_in, reserve_out, amount_in, fee_bps)
    assert (reserve_in + q.effective_in) * (reserve_out - q.amount_out) >= reserve_in * reserve_out
    assert q.new_reserve_in * q.new_reserve_out >= reserve_in * reserve_out


@settings(max_examples=300, deadline=None)
@given(reserve_x=liquidity, reserve_y=liquidity, lp_supply=liquidity, shares=liquidity)
def test_deposit_is_price_neutral_up_to_rounding(reserve_x: int, reserve_y: int, lp_supply: int, shares: int) -> None:
    x, y = deposit_amounts_for_shares(reserve_x, reserve_y, lp_supply, shares)
    for reserve, added in ((reserve_x, x), (reserve_y, y)):
        # reserve / supply may only drop, and by less than one unit over the new supply.
        drift = reserve * (lp_supply + shares) - (reserve + added) * lp_supply
        assert 0 <= drift < lp_supply


@settings(max_examples=300, deadline=None)
@given(reserve_x=liquidity, reserve_y=liquidity, lp_supply=liquidity, shares=liquidity)
def test_deposit_then_withdraw_never_pays_out_more(reserve_x: int, reserve_y: int, lp_supply: int, shares: int) -> None:
    x, y = deposit_amounts_for_shares(reserve_x, reserve_y, lp_supply, shares)
    assume(x > 0 and y > 0)
    wx, wy = withdraw_amounts_for_shares(reserve_x + x, reserve_y + y, lp_supply + shares, shares)
    assert wx <= x
    assert wy <= y
