"""
Pool operations engine (imperative shell around the curve kernel).

Each state-changing operation follows the same shape:
1. Read a fresh `PoolSnapshot` (config, both reserves, share supply).
2. Validate every precondition and compute amounts with the curve kernel.
3. Issue ledger calls in a fixed order inside one `ledger.atomic()` scope.

No ledger call is issued before all checks pass, so validation failures never
leave partial state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..errors import InvalidAmount, InvalidConfig, PoolAlreadyExists, PoolLocked, PoolNotFound, SlippageExceeded
from ..kernels.python.cp_curve_v1 import (
    PRECISION,
    SwapQuote,
    check_u64,
    deposit_amounts_for_shares,
    spot_price,
    swap_exact_in,
    withdraw_amounts_for_shares,
)
from ..state.balances import Address, Amount, AssetId
from ..state.config import PoolConfig, PoolKey, create
from ..state.store import ConfigStore
from . import lock
from .ledger import Identity, Ledger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Runtime config for the engine."""

    # Decimals of the share mint provisioned at initialization.
    share_decimals: int = PRECISION

    def __post_init__(self) -> None:
        if not isinstance(self.share_decimals, int) or isinstance(self.share_decimals, bool):
            raise TypeError("share_decimals must be an int")
        if not (0 <= self.share_decimals <= 18):
            raise InvalidConfig(f"share_decimals must be in [0, 18]: {self.share_decimals}")


@dataclass(frozen=True)
class PoolSnapshot:
    """State of one pool as read at the start of an operation."""

    config: PoolConfig
    pool_address: Address
    share_mint: AssetId
    reserve_x: Amount
    reserve_y: Amount
    lp_supply: Amount

    @property
    def is_empty(self) -> bool:
        return self.lp_supply == 0 and self.reserve_x == 0 and self.reserve_y == 0

    @property
    def k(self) -> int:
        return self.reserve_x * self.reserve_y


@dataclass(frozen=True)
class LiquidityResult:
    amount_x: Amount
    amount_y: Amount
    shares: Amount
    bootstrap: bool = False


@dataclass(frozen=True)
class SwapResult:
    is_x_input: bool
    amount_in: Amount
    amount_out: Amount
    fee_amount: Amount
    k_before: int
    k_after: int


def _require_bool(name: str, value: object) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{name} must be a bool")
    return value


def _require_unlocked(config: PoolConfig) -> None:
    if config.locked:
        raise PoolLocked(f"pool {config.key} is locked")


def _require_nonzero(name: str, value: Amount) -> Amount:
    check_u64(name, value)
    if value == 0:
        raise InvalidAmount(f"{name} must be non-zero")
    return value


class PoolEngine:
    """
    Initialize, deposit, withdraw, swap and lock for constant-product pools.

    The engine holds no pool state of its own: configuration comes from the
    store, balances and supply from the ledger, custodial addresses from the
    identity collaborator.
    """

    def __init__(
        self,
        ledger: Ledger,
        identity: Identity,
        store: ConfigStore,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self._ledger = ledger
        self._identity = identity
        self._store = store
        self._config = config if config is not None else EngineConfig()

    @property
    def config(self) -> EngineConfig:
        return self._config

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self, key: PoolKey) -> PoolSnapshot:
        config = self._store.get(key)
        pool_address = self._identity.pool_address(key)
        share_mint = self._identity.share_mint(key)
        # Each vault is read on its own; X and Y are never taken from the same account.
        return PoolSnapshot(
            config=config,
            pool_address=pool_address,
            share_mint=share_mint,
            reserve_x=self._ledger.balance_of(config.asset_x_id, pool_address),
            reserve_y=self._ledger.balance_of(config.asset_y_id, pool_address),
            lp_supply=self._ledger.supply_of(share_mint),
        )

    def quote_deposit(self, key: PoolKey, shares_to_mint: Amount) -> Tuple[Amount, Amount]:
        """Amounts a non-bootstrap deposit of `shares_to_mint` would take right now."""
        snap = self.snapshot(key)
        return deposit_amounts_for_shares(snap.reserve_x, snap.reserve_y, snap.lp_supply, shares_to_mint)

    def quote_withdraw(self, key: PoolKey, shares_to_burn: Amount) -> Tuple[Amount, Amount]:
        snap = self.snapshot(key)
        return withdraw_amounts_for_shares(snap.reserve_x, snap.reserve_y, snap.lp_supply, shares_to_burn)

    def quote_swap(self, key: PoolKey, is_x_input: bool, amount_in: Amount) -> SwapQuote:
        snap = self.snapshot(key)
        reserve_in, reserve_out = self._directional_reserves(snap, _require_bool("is_x_input", is_x_input))
        return swap_exact_in(reserve_in, reserve_out, amount_in, snap.config.fee_bps)

    def spot_price(self, key: PoolKey, *, is_x_base: bool = True, precision: int = PRECISION) -> int:
        """Price of one unit of the base asset in the other, scaled by 10**precision."""
        snap = self.snapshot(key)
        reserve_base, reserve_quote = self._directional_reserves(snap, _require_bool("is_x_base", is_x_base))
        return spot_price(reserve_base, reserve_quote, precision)

    # ------------------------------------------------------------------
    # State-changing operations
    # ------------------------------------------------------------------

    def initialize(
        self,
        seed: int,
        fee_bps: int,
        authority: Optional[Address],
        asset_x_id: AssetId,
        asset_y_id: AssetId,
    ) -> PoolKey:
        """
        Create the configuration record of a new pool and provision its share mint.

        Raises:
            InvalidFee: If fee_bps is outside [0, 10000]
            InvalidConfig: If the asset pair is invalid
            PoolAlreadyExists: If storage already holds this identity
            MintError: If the ledger already has the share mint; nothing is stored
        """
        config = create(seed, fee_bps, authority, asset_x_id, asset_y_id)
        key = config.key
        if self._pool_exists(key):
            raise PoolAlreadyExists(f"pool already exists: {key}")
        pool_address = self._identity.pool_address(key)
        share_mint = self._identity.share_mint(key)

        # Store write last: it is not covered by the ledger scope.
        with self._ledger.atomic():
            self._ledger.create_mint(share_mint, authority=pool_address, decimals=self._config.share_decimals)
            self._store.create(config)

        logger.info(
            "pool %s initialized: fee_bps=%d authority=%s share_mint=%s",
            key, fee_bps, authority, share_mint,
        )
        return key

    def deposit(
        self,
        key: PoolKey,
        user: Address,
        shares_to_mint: Amount,
        max_x: Amount,
        max_y: Amount,
    ) -> LiquidityResult:
        """
        Mint `shares_to_mint` shares to `user` against deposits of X and Y.

        The first deposit into an empty pool takes exactly (max_x, max_y) and
        thereby fixes the initial price. Later deposits are sized
        proportionally to the current reserves.

        Raises:
            PoolLocked, InvalidAmount, SlippageExceeded, ArithmeticOverflow,
            InvalidComputation, or a LedgerError from the ledger
        """
        snap = self.snapshot(key)
        _require_unlocked(snap.config)
        _require_nonzero("shares_to_mint", shares_to_mint)
        check_u64("max_x", max_x)
        check_u64("max_y", max_y)

        bootstrap = snap.is_empty
        if bootstrap:
            if max_x == 0 or max_y == 0:
                raise InvalidAmount("initial deposit must provide both assets")
            x, y = max_x, max_y
        else:
            x, y = deposit_amounts_for_shares(snap.reserve_x, snap.reserve_y, snap.lp_supply, shares_to_mint)
            if (x == 0 and y == 0) or (x == 0 and snap.reserve_x > 0) or (y == 0 and snap.reserve_y > 0):
                logger.debug("deposit into %s rejected: %d shares round to (%d, %d)", key, shares_to_mint, x, y)
                raise InvalidAmount(f"shares_to_mint too small: {shares_to_mint} shares round to ({x}, {y})")

        if not (x <= max_x and y <= max_y):
            logger.debug("deposit into %s rejected: needs (%d, %d), max (%d, %d)", key, x, y, max_x, max_y)
            raise SlippageExceeded(f"deposit needs ({x}, {y}) but max is ({max_x}, {max_y})")

        config = snap.config
        with self._ledger.atomic():
            self._ledger.transfer(config.asset_x_id, user, snap.pool_address, x)
            self._ledger.transfer(config.asset_y_id, user, snap.pool_address, y)
            self._ledger.mint(snap.share_mint, user, shares_to_mint, authority=snap.pool_address)

        logger.info(
            "deposit into %s: user=%s x=%d y=%d shares=%d bootstrap=%s",
            key, user, x, y, shares_to_mint, bootstrap,
        )
        return LiquidityResult(amount_x=x, amount_y=y, shares=shares_to_mint, bootstrap=bootstrap)

    def withdraw(
        self,
        key: PoolKey,
        user: Address,
        shares_to_burn: Amount,
        min_x: Amount,
        min_y: Amount,
    ) -> LiquidityResult:
        """
        Burn `shares_to_burn` of `user`'s shares for a proportional slice of both reserves.

        The vault transfers run before the burn. A request within the share
        supply that exceeds `user`'s holding fails at the burn (BurnError). A
        request above the whole supply normally asks for more than the vault
        holds and fails at the first transfer (TransferError). Either way the scope
        rolls back.

        Raises:
            PoolLocked, InvalidAmount, SlippageExceeded, DivisionByZero,
            ArithmeticOverflow, or a LedgerError
        """
        snap = self.snapshot(key)
        _require_unlocked(snap.config)
        _require_nonzero("shares_to_burn", shares_to_burn)
        check_u64("min_x", min_x)
        check_u64("min_y", min_y)

        x, y = withdraw_amounts_for_shares(snap.reserve_x, snap.reserve_y, snap.lp_supply, shares_to_burn)

        if not (min_x <= x and min_y <= y):
            logger.debug("withdraw from %s rejected: yields (%d, %d), min (%d, %d)", key, x, y, min_x, min_y)
            raise SlippageExceeded(f"withdraw yields ({x}, {y}) but min is ({min_x}, {min_y})")

        config = snap.config
        with self._ledger.atomic():
            self._ledger.transfer(config.asset_x_id, snap.pool_address, user, x)
            self._ledger.transfer(config.asset_y_id, snap.pool_address, user, y)
            self._ledger.burn(snap.share_mint, user, shares_to_burn)

        logger.info("withdraw from %s: user=%s x=%d y=%d shares=%d", key, user, x, y, shares_to_burn)
        return LiquidityResult(amount_x=x, amount_y=y, shares=shares_to_burn)

    def swap(
        self,
        key: PoolKey,
        user: Address,
        is_x_input: bool,
        amount_in: Amount,
        min_out: Amount,
    ) -> SwapResult:
        """
        Exchange `amount_in` of one reserve asset for the other.

        Raises:
            PoolLocked, InvalidAmount, SlippageExceeded, DivisionByZero,
            ArithmeticOverflow, or a LedgerError from the ledger
        """
        _require_bool("is_x_input", is_x_input)
        snap = self.snapshot(key)
        _require_unlocked(snap.config)
        _require_nonzero("amount_in", amount_in)
        check_u64("min_out", min_out)

        config = snap.config
        reserve_in, reserve_out = self._directional_reserves(snap, is_x_input)
        if is_x_input:
            asset_in, asset_out = config.asset_x_id, config.asset_y_id
        else:
            asset_in, asset_out = config.asset_y_id, config.asset_x_id

        quote = swap_exact_in(reserve_in, reserve_out, amount_in, config.fee_bps)

        if quote.amount_out < min_out:
            logger.debug("swap on %s rejected: out=%d < min_out=%d", key, quote.amount_out, min_out)
            raise SlippageExceeded(f"swap yields {quote.amount_out} but min_out is {min_out}")

        with self._ledger.atomic():
            self._ledger.transfer(asset_in, user, snap.pool_address, amount_in)
            self._ledger.transfer(asset_out, snap.pool_address, user, quote.amount_out)

        logger.info(
            "swap on %s: user=%s is_x_input=%s in=%d out=%d fee=%d",
            key, user, is_x_input, amount_in, quote.amount_out, quote.fee_amount,
        )
        return SwapResult(
            is_x_input=is_x_input,
            amount_in=amount_in,
            amount_out=quote.amount_out,
            fee_amount=quote.fee_amount,
            k_before=quote.k_before,
            k_after=quote.k_after,
        )

    def set_lock(self, key: PoolKey, caller: Address, desired_locked: bool) -> PoolConfig:
        """Lock or unlock a pool (authority only). Returns the stored record."""
        config = self._store.get(key)
        updated = lock.set_lock(config, caller, desired_locked, identity=self._identity)
        self._store.update(updated)
        logger.info("pool %s locked=%s by %s", key, updated.locked, caller)
        return updated

    def _pool_exists(self, key: PoolKey) -> bool:
        try:
            self._store.get(key)
        except PoolNotFound:
            return False
        return True

    @staticmethod
    def _directional_reserves(snap: PoolSnapshot, x_first: bool) -> Tuple[Amount, Amount]:
        if x_first:
            return snap.reserve_x, snap.reserve_y
        return snap.reserve_y, snap.reserve_x
