#!/usr/bin/env python3
"""Offline bootstrap / deposit / swap / withdraw walk-through using the command dispatch."""

from __future__ import annotations

import logging

from cpamm import DerivedIdentity, InMemoryConfigStore, InMemoryLedger, PoolEngine, PoolKey
from cpamm.integration import configure_logging, execute, load_settings

log = logging.getLogger("pool_demo")


def main() -> int:
    settings = load_settings()
    configure_logging(settings)

    ledger = InMemoryLedger()
    engine = PoolEngine(ledger, DerivedIdentity(), InMemoryConfigStore(), settings.engine)

    alice = "alice"
    asset_x = "USDC"
    asset_y = "SOL"
    ledger.fund(alice, asset_x, 1_000_000_000)
    ledger.fund(alice, asset_y, 1_000_000_000)

    res = execute(engine, {
        "op": "initialize", "seed": 7, "fee_bps": 30, "authority": alice,
        "asset_x_id": asset_x, "asset_y_id": asset_y,
    })
    if not res.ok:
        log.error("initialize failed: %s", res.error)
        return 1
    pool = res.result["pool"]

    steps = [
        {"op": "deposit", "pool": pool, "signer": alice, "amount": 1_000_000, "max_x": 100_000_000, "max_y": 200_000_000},
        {"op": "deposit", "pool": pool, "signer": alice, "amount": 500_000, "max_x": 60_000_000, "max_y": 110_000_000},
        {"op": "swap", "pool": pool, "signer": alice, "is_x": True, "amount": 10_000_000, "min": 1},
        {"op": "swap", "pool": pool, "signer": alice, "is_x": False, "amount": 20_000_000, "min": 1},
        {"op": "withdraw", "pool": pool, "signer": alice, "amount": 750_000, "min_x": 0, "min_y": 0},
        {"op": "update_lock", "pool": pool, "signer": alice, "lock": True},
        {"op": "swap", "pool": pool, "signer": alice, "is_x": True, "amount": 1_000, "min": 0},
    ]
    for step in steps:
        res = execute(engine, step)
        if res.ok:
            log.info("%s ok: %s", step["op"], res.result)
        else:
            log.warning("%s rejected: %s", step["op"], res.error)

    snap = engine.snapshot(PoolKey(**pool))
    log.info("final reserves: x=%d y=%d supply=%d", snap.reserve_x, snap.reserve_y, snap.lp_supply)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
