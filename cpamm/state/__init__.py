"""
State records and storage for cpamm pools
"""

from .balances import BalanceTable
from .config import PoolConfig, PoolKey, create
from .store import ConfigStore, InMemoryConfigStore

__all__ = [
    "BalanceTable",
    "PoolConfig",
    "PoolKey",
    "create",
    "ConfigStore",
    "InMemoryConfigStore",
]
