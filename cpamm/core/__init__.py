"""
Pool core: operations engine, lock controller and collaborator interfaces.
"""

from .ledger import DerivedIdentity, Identity, InMemoryLedger, Ledger
from .lock import set_lock
from .pool import EngineConfig, LiquidityResult, PoolEngine, PoolSnapshot, SwapResult

__all__ = [
    "DerivedIdentity",
    "Identity",
    "InMemoryLedger",
    "Ledger",
    "set_lock",
    "EngineConfig",
    "LiquidityResult",
    "PoolEngine",
    "PoolSnapshot",
    "SwapResult",
]
