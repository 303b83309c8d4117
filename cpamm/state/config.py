"""
Pool configuration record.

One `PoolConfig` exists per pool instance. It is the single source of truth
for pool identity (asset pair + seed) and policy (fee, lock flag, authority).
Reserves and share supply are never stored here; they live with the ledger.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..errors import InvalidConfig, InvalidFee
from .balances import Address, AssetId
from .canonical import domain_sep_bytes, encode_bool, encode_optional_str, encode_str, encode_uvarint, sha256_hex


BPS_DENOM = 10_000
U64_MAX = (1 << 64) - 1


def _require_asset_id(name: str, value: Any) -> None:
    if not isinstance(value, str) or not value:
        raise InvalidConfig(f"{name} must be a non-empty string")


def _require_seed(seed: Any) -> None:
    if not isinstance(seed, int) or isinstance(seed, bool):
        raise TypeError("seed must be an int")
    if not (0 <= seed <= U64_MAX):
        raise InvalidConfig(f"seed must fit in u64: {seed}")


def _require_fee(fee_bps: Any) -> None:
    if not isinstance(fee_bps, int) or isinstance(fee_bps, bool):
        raise TypeError("fee_bps must be an int")
    if not (0 <= fee_bps <= BPS_DENOM):
        raise InvalidFee(f"fee_bps must be in [0, {BPS_DENOM}]: {fee_bps}")


@dataclass(frozen=True)
class PoolKey:
    """Storage identity of a pool: (asset_x_id, asset_y_id, seed)."""

    asset_x_id: AssetId
    asset_y_id: AssetId
    seed: int

    def __str__(self) -> str:
        return f"{self.asset_x_id}/{self.asset_y_id}#{self.seed}"


@dataclass(frozen=True)
class PoolConfig:
    """
    Durable state of a single pool.

    Attributes:
        seed: Discriminator separating pools for the same asset pair (u64)
        authority: Principal allowed to lock/unlock; None means nobody can
        asset_x_id: Identity of reserve asset X
        asset_y_id: Identity of reserve asset Y
        fee_bps: Swap fee in basis points of the input amount (0-10000)
        locked: When True, deposit/withdraw/swap are rejected
    """

    seed: int
    authority: Optional[Address]
    asset_x_id: AssetId
    asset_y_id: AssetId
    fee_bps: int
    locked: bool = False

    def __post_init__(self) -> None:
        _require_seed(self.seed)
        _require_asset_id("asset_x_id", self.asset_x_id)
        _require_asset_id("asset_y_id", self.asset_y_id)
        if self.asset_x_id == self.asset_y_id:
            raise InvalidConfig(f"asset_x_id and asset_y_id must differ: {self.asset_x_id}")
        _require_fee(self.fee_bps)
        if self.authority is not None and (not isinstance(self.authority, str) or not self.authority):
            raise InvalidConfig("authority must be a non-empty string or None")
        if not isinstance(self.locked, bool):
            raise TypeError("locked must be a bool")

    @property
    def key(self) -> PoolKey:
        return PoolKey(asset_x_id=self.asset_x_id, asset_y_id=self.asset_y_id, seed=self.seed)


def create(
    seed: int,
    fee_bps: int,
    authority: Optional[Address],
    asset_x_id: AssetId,
    asset_y_id: AssetId,
) -> PoolConfig:
    """
    Build the configuration record of a new pool (unlocked).

    Duplicate identities are rejected by storage, not here.

    Raises:
        InvalidFee: If fee_bps is outside [0, 10000]
        InvalidConfig: If the asset pair or seed is invalid
    """
    _require_fee(fee_bps)
    return PoolConfig(
        seed=seed,
        authority=authority,
        asset_x_id=asset_x_id,
        asset_y_id=asset_y_id,
        fee_bps=fee_bps,
        locked=False,
    )


def config_to_dict(config: PoolConfig) -> Dict[str, Any]:
    return {
        "seed": config.seed,
        "authority": config.authority,
        "asset_x_id": config.asset_x_id,
        "asset_y_id": config.asset_y_id,
        "fee_bps": config.fee_bps,
        "locked": config.locked,
    }


def config_from_dict(data: Mapping[str, Any]) -> PoolConfig:
    if not isinstance(data, Mapping):
        raise TypeError("config data must be a mapping")
    missing = {"seed", "asset_x_id", "asset_y_id", "fee_bps"} - set(data.keys())
    if missing:
        raise InvalidConfig(f"config data missing fields: {sorted(missing)}")
    return PoolConfig(
        seed=data["seed"],
        authority=data.get("authority"),
        asset_x_id=data["asset_x_id"],
        asset_y_id=data["asset_y_id"],
        fee_bps=data["fee_bps"],
        locked=data.get("locked", False),
    )


def config_digest(config: PoolConfig) -> str:
    """Fingerprint of the full record (identity + policy)."""
    data = (
        domain_sep_bytes("pool_config")
        + encode_str(config.asset_x_id)
        + encode_str(config.asset_y_id)
        + encode_uvarint(config.seed)
        + encode_uvarint(config.fee_bps)
        + encode_optional_str(config.authority)
        + encode_bool(config.locked)
    )
    return sha256_hex(data)
