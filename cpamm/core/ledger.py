"""
Ledger and identity collaborators.

The pool core never holds balances itself. It reads reserves and share supply
from a `Ledger`, and asks it to move, mint and burn. Custodial addresses and
signer checks come from an `Identity`. Both are injected into the engine.

`InMemoryLedger` and `DerivedIdentity` are reference implementations used by
tests, the dispatch adapter and the offline demo.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import ContextManager, Dict, Iterator, Optional, Protocol

from ..errors import BurnError, MintError, TransferError
from ..state.balances import U64_MAX, Address, Amount, AssetId, BalanceTable
from ..state.canonical import domain_sep_bytes, encode_str, encode_uvarint, sha256_hex
from ..state.config import PoolKey


class Ledger(Protocol):
    def transfer(self, asset_id: AssetId, src: Address, dst: Address, amount: Amount) -> None: ...

    def mint(self, asset_id: AssetId, to: Address, amount: Amount, *, authority: Address) -> None: ...

    def burn(self, asset_id: AssetId, src: Address, amount: Amount) -> None: ...

    def balance_of(self, asset_id: AssetId, owner: Address) -> Amount: ...

    def supply_of(self, asset_id: AssetId) -> Amount: ...

    def create_mint(self, asset_id: AssetId, *, authority: Address, decimals: int) -> None: ...

    def atomic(self) -> ContextManager[None]: ...


class Identity(Protocol):
    def pool_address(self, key: PoolKey) -> Address: ...

    def share_mint(self, key: PoolKey) -> AssetId: ...

    def is_signer(self, signer: Address, principal: Address) -> bool: ...


def _require_amount(amount: Amount) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TypeError("amount must be an int")
    if amount < 0:
        raise ValueError(f"amount must be non-negative: {amount}")


@dataclass(frozen=True)
class MintInfo:
    authority: Address
    decimals: int


class InMemoryLedger:
    """
    Balance-table ledger with all-or-nothing scopes.

    Every primitive is individually atomic. `atomic()` extends that to a group
    of calls: if an exception escapes the scope, balances, supplies and mints
    are restored to their state at entry. Scopes nest; only the outermost one
    snapshots.
    """

    def __init__(self) -> None:
        self._balances = BalanceTable()
        self._supply: Dict[AssetId, Amount] = {}
        self._mints: Dict[AssetId, MintInfo] = {}
        self._depth = 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        if self._depth > 0:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        saved = (self._balances.copy(), dict(self._supply), dict(self._mints))
        self._depth = 1
        try:
            yield
        except BaseException:
            self._balances, self._supply, self._mints = saved
            raise
        finally:
            self._depth = 0

    def create_mint(self, asset_id: AssetId, *, authority: Address, decimals: int) -> None:
        if asset_id in self._mints:
            raise MintError(f"mint already exists: {asset_id}")
        if not isinstance(decimals, int) or isinstance(decimals, bool) or decimals < 0:
            raise MintError(f"invalid decimals: {decimals!r}")
        self._mints[asset_id] = MintInfo(authority=authority, decimals=decimals)
        self._supply[asset_id] = 0

    def mint_info(self, asset_id: AssetId) -> Optional[MintInfo]:
        return self._mints.get(asset_id)

    def fund(self, owner: Address, asset_id: AssetId, amount: Amount) -> None:
        """Credit an externally issued asset (reserve tokens in tests and demos)."""
        _require_amount(amount)
        if asset_id in self._mints:
            raise MintError(f"{asset_id} is a managed mint; use mint()")
        try:
            self._balances.credit(owner, asset_id, amount)
        except OverflowError as exc:
            raise MintError(str(exc)) from exc

    def transfer(self, asset_id: AssetId, src: Address, dst: Address, amount: Amount) -> None:
        _require_amount(amount)
        try:
            self._balances.move(asset_id, src, dst, amount)
        except (ValueError, OverflowError) as exc:
            raise TransferError(str(exc)) from exc

    def mint(self, asset_id: AssetId, to: Address, amount: Amount, *, authority: Address) -> None:
        _require_amount(amount)
        info = self._mints.get(asset_id)
        if info is None:
            raise MintError(f"unknown mint: {asset_id}")
        if authority != info.authority:
            raise MintError(f"{authority} lacks minting authority over {asset_id}")
        new_supply = self._supply[asset_id] + amount
        if new_supply > U64_MAX:
            raise MintError(f"supply overflow for {asset_id}")
        # No holder can exceed the supply, so this credit cannot overflow.
        self._balances.credit(to, asset_id, amount)
        self._supply[asset_id] = new_supply

    def burn(self, asset_id: AssetId, src: Address, amount: Amount) -> None:
        _require_amount(amount)
        try:
            self._balances.debit(src, asset_id, amount)
        except ValueError as exc:
            raise BurnError(str(exc)) from exc
        if asset_id in self._supply:
            self._supply[asset_id] -= amount

    def balance_of(self, asset_id: AssetId, owner: Address) -> Amount:
        return self._balances.get(owner, asset_id)

    def supply_of(self, asset_id: AssetId) -> Amount:
        if asset_id in self._supply:
            return self._supply[asset_id]
        return self._balances.total(asset_id)

    def __repr__(self) -> str:
        return f"InMemoryLedger(balances={self._balances!r}, mints={len(self._mints)})"


class DerivedIdentity:
    """
    Hash-derived custodial identities.

    pool_address = H(sep("pool_authority") || x || y || seed)
    share_mint   = H(sep("share_mint") || pool_address)
    """

    def pool_address(self, key: PoolKey) -> Address:
        data = (
            domain_sep_bytes("pool_authority")
            + encode_str(key.asset_x_id)
            + encode_str(key.asset_y_id)
            + encode_uvarint(key.seed)
        )
        return sha256_hex(data)

    def share_mint(self, key: PoolKey) -> AssetId:
        return sha256_hex(domain_sep_bytes("share_mint") + encode_str(self.pool_address(key)))

    def is_signer(self, signer: Address, principal: Address) -> bool:
        if not isinstance(signer, str) or not isinstance(principal, str):
            return False
        return bool(signer) and signer == principal
