"""
Outer command dispatch.

Deserializes caller intent (JSON-like dicts) into typed commands and invokes
the pool engine. One command per engine operation:

    initialize   seed, fee_bps, authority?, asset_x_id, asset_y_id
    deposit      pool, signer, amount, max_x, max_y
    withdraw     pool, signer, amount, min_x, min_y
    swap         pool, signer, is_x, amount, min
    update_lock  pool, signer, lock
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..core.pool import PoolEngine
from ..errors import AmmError, LedgerError
from ..state.config import PoolKey

logger = logging.getLogger(__name__)


OPS = ("initialize", "deposit", "withdraw", "swap", "update_lock")

_ARG_SPECS: Dict[str, Dict[str, str]] = {
    "initialize": {"seed": "int", "fee_bps": "int", "asset_x_id": "str", "asset_y_id": "str"},
    "deposit": {"amount": "int", "max_x": "int", "max_y": "int"},
    "withdraw": {"amount": "int", "min_x": "int", "min_y": "int"},
    "swap": {"is_x": "bool", "amount": "int", "min": "int"},
    "update_lock": {"lock": "bool"},
}


def _require_str(value: Any, *, name: str, non_empty: bool = True, max_len: int = 4096) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    if non_empty and not value:
        raise ValueError(f"{name} must be non-empty")
    if max_len > 0 and len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _require_int(value: Any, *, name: str, non_negative: bool = False) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an int")
    if non_negative and value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


def _require_bool(value: Any, *, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a bool")
    return value


def _parse_pool_key(value: Any) -> PoolKey:
    if not isinstance(value, Mapping):
        raise ValueError("pool must be an object")
    return PoolKey(
        asset_x_id=_require_str(value.get("asset_x_id"), name="pool.asset_x_id"),
        asset_y_id=_require_str(value.get("asset_y_id"), name="pool.asset_y_id"),
        seed=_require_int(value.get("seed"), name="pool.seed", non_negative=True),
    )


def pool_key_to_dict(key: PoolKey) -> Dict[str, Any]:
    return {"asset_x_id": key.asset_x_id, "asset_y_id": key.asset_y_id, "seed": key.seed}


@dataclass(frozen=True)
class Command:
    op: str
    args: Mapping[str, Any]
    pool: Optional[PoolKey] = None
    signer: Optional[str] = None


@dataclass(frozen=True)
class DispatchResult:
    ok: bool
    result: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


def parse_command(payload: Any) -> Command:
    """
    Parse and type-check one command payload.

    Raises:
        ValueError: If the payload is malformed
    """
    if not isinstance(payload, Mapping):
        raise ValueError(f"command must be an object, got {type(payload)}")
    op = payload.get("op")
    if op not in OPS:
        raise ValueError(f"unknown op: {op!r}")

    args: Dict[str, Any] = {}
    for name, kind in _ARG_SPECS[op].items():
        value = payload.get(name)
        if kind == "int":
            args[name] = _require_int(value, name=name, non_negative=True)
        elif kind == "bool":
            args[name] = _require_bool(value, name=name)
        else:
            args[name] = _require_str(value, name=name)

    if op == "initialize":
        authority = payload.get("authority")
        args["authority"] = None if authority is None else _require_str(authority, name="authority")
        return Command(op=op, args=args)

    return Command(
        op=op,
        args=args,
        pool=_parse_pool_key(payload.get("pool")),
        signer=_require_str(payload.get("signer"), name="signer"),
    )


def dispatch(engine: PoolEngine, command: Command) -> Dict[str, Any]:
    """Invoke the engine for `command`; engine and ledger errors propagate."""
    a = command.args
    if command.op == "initialize":
        key = engine.initialize(a["seed"], a["fee_bps"], a["authority"], a["asset_x_id"], a["asset_y_id"])
        return {"pool": pool_key_to_dict(key)}

    if command.pool is None or command.signer is None:
        raise ValueError(f"{command.op} requires pool and signer")
    if command.op == "deposit":
        res = engine.deposit(command.pool, command.signer, a["amount"], a["max_x"], a["max_y"])
        return {"x": res.amount_x, "y": res.amount_y, "shares": res.shares}
    if command.op == "withdraw":
        res = engine.withdraw(command.pool, command.signer, a["amount"], a["min_x"], a["min_y"])
        return {"x": res.amount_x, "y": res.amount_y, "shares": res.shares}
    if command.op == "swap":
        swap = engine.swap(command.pool, command.signer, a["is_x"], a["amount"], a["min"])
        return {"amount_in": swap.amount_in, "amount_out": swap.amount_out, "fee": swap.fee_amount}
    if command.op == "update_lock":
        config = engine.set_lock(command.pool, command.signer, a["lock"])
        return {"locked": config.locked}
    raise ValueError(f"unknown op: {command.op!r}")


def execute(engine: PoolEngine, payload: Any) -> DispatchResult:
    """
    Parse and dispatch one payload, reporting rejections as a result.

    Malformed payloads, pool-core rejections and ledger failures become
    `ok=False`; anything else propagates.
    """
    try:
        command = parse_command(payload)
        return DispatchResult(ok=True, result=dispatch(engine, command))
    except (ValueError, TypeError, AmmError, LedgerError) as exc:
        logger.debug("command rejected: %s: %s", type(exc).__name__, exc)
        return DispatchResult(ok=False, error=f"{type(exc).__name__}: {exc}")
