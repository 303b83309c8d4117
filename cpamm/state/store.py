"""
Storage collaborator for pool configuration records.

The core only needs create/read/update keyed by `PoolKey`. Creating the same
identity twice is rejected here (idempotency key), never re-checked by the
engine.
"""

from __future__ import annotations

from typing import Dict, List, Protocol

from ..errors import PoolAlreadyExists, PoolNotFound
from .config import PoolConfig, PoolKey


class ConfigStore(Protocol):
    def create(self, config: PoolConfig) -> None: ...

    def get(self, key: PoolKey) -> PoolConfig: ...

    def update(self, config: PoolConfig) -> None: ...


class InMemoryConfigStore:
    """Dict-backed `ConfigStore`."""

    def __init__(self) -> None:
        self._records: Dict[PoolKey, PoolConfig] = {}

    def create(self, config: PoolConfig) -> None:
        key = config.key
        if key in self._records:
            raise PoolAlreadyExists(f"pool already exists: {key}")
        self._records[key] = config

    def get(self, key: PoolKey) -> PoolConfig:
        try:
            return self._records[key]
        except KeyError:
            raise PoolNotFound(f"unknown pool: {key}") from None

    def update(self, config: PoolConfig) -> None:
        key = config.key
        if key not in self._records:
            raise PoolNotFound(f"unknown pool: {key}")
        self._records[key] = config

    def keys(self) -> List[PoolKey]:
        return sorted(self._records.keys(), key=lambda k: (k.asset_x_id, k.asset_y_id, k.seed))

    def __len__(self) -> int:
        return len(self._records)
