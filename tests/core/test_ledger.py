from __future__ import annotations

import pytest

from cpamm.core.ledger import DerivedIdentity, InMemoryLedger
from cpamm.errors import BurnError, MintError, TransferError
from cpamm.state import PoolKey


def test_transfer_moves_balance() -> None:
    ledger = InMemoryLedger()
    ledger.fund("a", "X", 100)
    ledger.transfer("X", "a", "b", 40)
    assert ledger.balance_of("X", "a") == 60
    assert ledger.balance_of("X", "b") == 40


def test_transfer_rejects_insufficient_balance() -> None:
    ledger = InMemoryLedger()
    ledger.fund("a", "X", 10)
    with pytest.raises(TransferError, match="insufficient"):
        ledger.transfer("X", "a", "b", 11)
    assert ledger.balance_of("X", "a") == 10


def test_balances_are_capped_at_u64() -> None:
    ledger = InMemoryLedger()
    ledger.fund("a", "X", 10)
    ledger.fund("b", "X", (1 << 64) - 5)
    with pytest.raises(TransferError, match="exceed"):
        ledger.transfer("X", "a", "b", 10)
    with pytest.raises(MintError):
        ledger.fund("b", "X", 6)
    assert ledger.balance_of("X", "a") == 10


def test_mint_requires_mint_authority() -> None:
    ledger = InMemoryLedger()
    ledger.create_mint("LP", authority="pool", decimals=6)
    ledger.mint("LP", "a", 5, authority="pool")
    assert ledger.supply_of("LP") == 5
    with pytest.raises(MintError, match="authority"):
        ledger.mint("LP", "a", 5, authority="a")
    with pytest.raises(MintError, match="unknown mint"):
        ledger.mint("OTHER", "a", 5, authority="pool")
    assert ledger.mint_info("LP").decimals == 6


def test_create_mint_twice_fails() -> None:
    ledger = InMemoryLedger()
    ledger.create_mint("LP", authority="pool", decimals=6)
    with pytest.raises(MintError):
        ledger.create_mint("LP", authority="pool", decimals=6)


def test_burn_reduces_supply_and_rejects_overdraw() -> None:
    ledger = InMemoryLedger()
    ledger.create_mint("LP", authority="pool", decimals=6)
    ledger.mint("LP", "a", 10, authority="pool")
    ledger.burn("LP", "a", 4)
    assert ledger.supply_of("LP") == 6
    with pytest.raises(BurnError):
        ledger.burn("LP", "a", 7)
    assert ledger.supply_of("LP") == 6


def test_atomic_scope_rolls_back_every_call() -> None:
    ledger = InMemoryLedger()
    ledger.fund("a", "X", 100)
    ledger.create_mint("LP", authority="pool", decimals=6)
    with pytest.raises(BurnError):
        with ledger.atomic():
            ledger.transfer("X", "a", "pool", 60)
            ledger.mint("LP", "a", 10, authority="pool")
            ledger.burn("LP", "a", 11)
    assert ledger.balance_of("X", "a") == 100
    assert ledger.balance_of("X", "pool") == 0
    assert ledger.supply_of("LP") == 0


def test_nested_atomic_scopes_roll_back_to_outermost_entry() -> None:
    ledger = InMemoryLedger()
    ledger.fund("a", "X", 100)
    with pytest.raises(TransferError):
        with ledger.atomic():
            ledger.transfer("X", "a", "b", 10)
            with ledger.atomic():
                ledger.transfer("X", "a", "b", 10)
            ledger.transfer("X", "a", "b", 1000)
    assert ledger.balance_of("X", "b") == 0


def test_atomic_scope_commits_on_success() -> None:
    ledger = InMemoryLedger()
    ledger.fund("a", "X", 100)
    with ledger.atomic():
        ledger.transfer("X", "a", "b", 30)
    assert ledger.balance_of("X", "b") == 30


def test_derived_identity_is_deterministic_and_seed_scoped() -> None:
    identity = DerivedIdentity()
    k1 = PoolKey(asset_x_id="x", asset_y_id="y", seed=1)
    k2 = PoolKey(asset_x_id="x", asset_y_id="y", seed=2)
    assert identity.pool_address(k1) == DerivedIdentity().pool_address(k1)
    assert identity.pool_address(k1) != identity.pool_address(k2)
    assert identity.share_mint(k1) != identity.pool_address(k1)
    assert identity.pool_address(k1).startswith("0x")


def test_derived_identity_signer_check() -> None:
    identity = DerivedIdentity()
    assert identity.is_signer("alice", "alice")
    assert not identity.is_signer("bob", "alice")
    assert not identity.is_signer("", "")
