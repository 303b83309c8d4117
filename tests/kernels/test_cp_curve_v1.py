from __future__ import annotations

import pytest

from cpamm.errors import ArithmeticOverflow, DivisionByZero, InvalidAmount, InvalidComputation, InvalidFee
from cpamm.kernels.python.cp_curve_v1 import (
    U64_MAX,
    deposit_amounts_for_shares,
    effective_input,
    spot_price,
    swap_exact_in,
    swap_output,
    withdraw_amounts_for_shares,
)


def test_swap_output_reference_scenario() -> None:
    # effective_in = floor(100 * 9970 / 10000) = 99
    # retained = ceil(1000 * 2000 / 1099) = 1820
    assert effective_input(100, 30) == 99
    assert swap_output(1000, 2000, 100, 30) == 180


def test_swap_exact_in_breakdown_keeps_fee_in_pool() -> None:
    q = swap_exact_in(1000, 2000, 100, 30)
    assert q.effective_in == 99
    assert q.fee_amount == 1
    assert q.amount_out == 180
    assert q.new_reserve_in == 1100
    assert q.new_reserve_out == 1820
    assert q.k_before == 2_000_000
    assert q.k_after == 1100 * 1820
    assert q.k_after >= q.k_before


def test_swap_output_never_drains_reserve_out() -> None:
    # With floor on the retained reserve this would pay out the whole reserve.
    assert swap_output(1, 1, 5, 0) == 0
    assert swap_output(1, 10, 1000, 0) == 9
    assert swap_output(3, 7, U64_MAX - 3, 0) == 6


def test_full_fee_yields_nothing() -> None:
    q = swap_exact_in(1000, 2000, 500, 10_000)
    assert q.effective_in == 0
    assert q.amount_out == 0
    assert q.fee_amount == 500


def test_swap_rejects_zero_input() -> None:
    with pytest.raises(InvalidAmount):
        swap_output(1000, 2000, 0, 30)


@pytest.mark.parametrize("fee_bps", [-1, 10_001])
def test_swap_rejects_fee_out_of_range(fee_bps: int) -> None:
    with pytest.raises(InvalidFee):
        swap_output(1000, 2000, 100, fee_bps)


def test_swap_rejects_empty_reserve() -> None:
    with pytest.raises(DivisionByZero):
        swap_output(0, 2000, 100, 30)
    with pytest.raises(DivisionByZero):
        swap_output(1000, 0, 100, 30)


def test_swap_rejects_input_vault_overflow() -> None:
    with pytest.raises(ArithmeticOverflow, match="new_reserve_in"):
        swap_output(U64_MAX, 2000, 1, 0)


def test_amounts_outside_u64_are_rejected() -> None:
    with pytest.raises(ArithmeticOverflow):
        swap_output(1000, 2000, U64_MAX + 1, 30)
    with pytest.raises(InvalidAmount):
        deposit_amounts_for_shares(1000, 2000, 1000, -5)


def test_bool_is_not_an_amount() -> None:
    with pytest.raises(TypeError):
        swap_output(1000, 2000, True, 30)


def test_deposit_amounts_are_proportional_and_floored() -> None:
    assert deposit_amounts_for_shares(1000, 2000, 1000, 500) == (500, 1000)
    # floor(333 * 1000 / 1000), floor(333 * 2000 / 1000)
    assert deposit_amounts_for_shares(1000, 2000, 1000, 333) == (333, 666)
    # floor(7 * 1000 / 3) = 2333, floor(7 * 2000 / 3) = 4666
    assert deposit_amounts_for_shares(1000, 2000, 3, 7) == (2333, 4666)


def test_deposit_amounts_require_existing_supply() -> None:
    with pytest.raises(InvalidComputation):
        deposit_amounts_for_shares(0, 0, 0, 100)


def test_deposit_amounts_result_must_fit_u64() -> None:
    with pytest.raises(ArithmeticOverflow):
        deposit_amounts_for_shares(U64_MAX, 1, 1, U64_MAX)


def test_withdraw_amounts_from_empty_pool() -> None:
    with pytest.raises(DivisionByZero):
        withdraw_amounts_for_shares(0, 0, 0, 1)


def test_withdraw_amounts_do_not_check_supply() -> None:
    # Over-burning is the ledger's call; the math just scales.
    assert withdraw_amounts_for_shares(1000, 2000, 1000, 2000) == (2000, 4000)


def test_spot_price_is_scaled_by_precision() -> None:
    assert spot_price(1000, 2000) == 2_000_000
    assert spot_price(2000, 1000) == 500_000
    assert spot_price(3, 1, precision=2) == 33
    with pytest.raises(DivisionByZero):
        spot_price(0, 1000)
