"""
Lock controller: authority-gated toggle of a pool's operational lock.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..errors import Unauthorized
from ..state.balances import Address
from ..state.config import PoolConfig
from .ledger import Identity

logger = logging.getLogger(__name__)


def set_lock(config: PoolConfig, caller: Address, desired_locked: bool, *, identity: Identity) -> PoolConfig:
    """
    Return `config` with `locked = desired_locked`.

    Only the pool authority may lock or unlock; a pool created without an
    authority can never change its lock state. Setting the current value again
    is not an error.

    Raises:
        Unauthorized: If the pool has no authority or `caller` is not it
    """
    if not isinstance(desired_locked, bool):
        raise TypeError("desired_locked must be a bool")
    if config.authority is None:
        logger.debug("set_lock rejected for %s: pool has no authority", config.key)
        raise Unauthorized(f"pool {config.key} has no lock authority")
    if not identity.is_signer(caller, config.authority):
        logger.debug("set_lock rejected for %s: %s is not the authority", config.key, caller)
        raise Unauthorized(f"{caller} is not the lock authority of pool {config.key}")
    return replace(config, locked=desired_locked)
