"""
Per-(owner, asset) balance storage behind the in-memory ledger.

Every balance is bounded by the table's cap (u64 by default):
- `credit` refuses to push a balance past the cap (OverflowError)
- `debit` refuses to take a balance below zero (ValueError)
- `move` checks both sides before touching either
"""

from typing import Dict, Tuple


# Type aliases
Address = str  # opaque principal / custodial address
AssetId = str  # opaque asset identifier (reserve asset or share mint)
Amount = int  # non-negative, at most U64_MAX

U64_MAX = (1 << 64) - 1


class BalanceTable:
    """
    Sparse (owner, asset) -> amount map; zero balances are dropped.
    """

    def __init__(self, cap: Amount = U64_MAX):
        self.cap = cap
        self._entries: Dict[Tuple[Address, AssetId], Amount] = {}

    def get(self, owner: Address, asset: AssetId) -> Amount:
        return self._entries.get((owner, asset), 0)

    def _store(self, owner: Address, asset: AssetId, amount: Amount) -> None:
        if amount:
            self._entries[(owner, asset)] = amount
        else:
            self._entries.pop((owner, asset), None)

    def _check_credit(self, owner: Address, asset: AssetId, amount: Amount) -> Amount:
        new_balance = self.get(owner, asset) + amount
        if new_balance > self.cap:
            raise OverflowError(f"{asset} balance of {owner} would exceed {self.cap}")
        return new_balance

    def _check_debit(self, owner: Address, asset: AssetId, amount: Amount) -> Amount:
        held = self.get(owner, asset)
        if held < amount:
            raise ValueError(f"insufficient {asset} balance for {owner}: {held} < {amount}")
        return held - amount

    def credit(self, owner: Address, asset: AssetId, amount: Amount) -> None:
        self._store(owner, asset, self._check_credit(owner, asset, amount))

    def debit(self, owner: Address, asset: AssetId, amount: Amount) -> None:
        self._store(owner, asset, self._check_debit(owner, asset, amount))

    def move(self, asset: AssetId, src: Address, dst: Address, amount: Amount) -> None:
        """
        Debit `src` and credit `dst` as one step.

        Raises:
            ValueError: If `src` holds less than `amount`
            OverflowError: If `dst` would exceed the cap
        """
        src_after = self._check_debit(src, asset, amount)
        if src == dst:
            return
        dst_after = self._check_credit(dst, asset, amount)
        self._store(src, asset, src_after)
        self._store(dst, asset, dst_after)

    def total(self, asset: AssetId) -> Amount:
        """Sum of all balances held in `asset`."""
        return sum(amount for (_, a), amount in self._entries.items() if a == asset)

    def copy(self) -> "BalanceTable":
        out = BalanceTable(self.cap)
        out._entries = dict(self._entries)
        return out

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._entries)} entries, cap={self.cap})"
