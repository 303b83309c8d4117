"""
cpamm: accounting core of a two-asset constant-product AMM.
"""

from .core import (
    DerivedIdentity,
    EngineConfig,
    InMemoryLedger,
    LiquidityResult,
    PoolEngine,
    PoolSnapshot,
    SwapResult,
)
from .state import InMemoryConfigStore, PoolConfig, PoolKey

__version__ = "0.1.0"

__all__ = [
    "DerivedIdentity",
    "EngineConfig",
    "InMemoryConfigStore",
    "InMemoryLedger",
    "LiquidityResult",
    "PoolConfig",
    "PoolEngine",
    "PoolKey",
    "PoolSnapshot",
    "SwapResult",
]
