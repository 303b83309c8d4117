from __future__ import annotations

import pytest

from cpamm import DerivedIdentity, InMemoryConfigStore, InMemoryLedger, PoolEngine, PoolKey

ALICE = "alice"
BOB = "bob"
MALLORY = "mallory"
ASSET_X = "asset-x"
ASSET_Y = "asset-y"
STARTING_BALANCE = 1_000_000_000


@pytest.fixture
def ledger() -> InMemoryLedger:
    ledger = InMemoryLedger()
    for user in (ALICE, BOB, MALLORY):
        ledger.fund(user, ASSET_X, STARTING_BALANCE)
        ledger.fund(user, ASSET_Y, STARTING_BALANCE)
    return ledger


@pytest.fixture
def identity() -> DerivedIdentity:
    return DerivedIdentity()


@pytest.fixture
def store() -> InMemoryConfigStore:
    return InMemoryConfigStore()


@pytest.fixture
def engine(ledger: InMemoryLedger, identity: DerivedIdentity, store: InMemoryConfigStore) -> PoolEngine:
    return PoolEngine(ledger, identity, store)


@pytest.fixture
def pool(engine: PoolEngine) -> PoolKey:
    """Unfunded pool with a 30 bps fee, authority ALICE."""
    return engine.initialize(seed=1, fee_bps=30, authority=ALICE, asset_x_id=ASSET_X, asset_y_id=ASSET_Y)


@pytest.fixture
def funded_pool(engine: PoolEngine, pool: PoolKey) -> PoolKey:
    """`pool` bootstrapped by ALICE at reserves (1000, 2000) with 1000 shares."""
    engine.deposit(pool, ALICE, 1000, 1000, 2000)
    return pool
