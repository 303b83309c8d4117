"""Exception types for the pool core.

Every precondition failure raised by the curve math, the configuration record,
the engine and the lock controller derives from ``AmmError``. Ledger failures
are a separate family (``LedgerError``) because they are raised by the ledger
collaborator and surfaced to callers unchanged.
"""

from __future__ import annotations


class AmmError(Exception):
    """Base class for pool-core rejections."""


class InvalidAmount(AmmError):
    """Raised for zero-amount requests (or amounts that would round to nothing)."""


class InvalidFee(AmmError):
    """Raised when a fee is outside [0, 10000] basis points."""


class InvalidConfig(AmmError):
    """Raised when a pool configuration record would violate its invariants."""


class PoolLocked(AmmError):
    """Raised when deposit/withdraw/swap is attempted on a locked pool."""


class SlippageExceeded(AmmError):
    """Raised when a derived amount violates the caller-supplied bound."""


class ArithmeticOverflow(AmmError):
    """Raised when a value or intermediate product leaves its representable range."""


class DivisionByZero(AmmError):
    """Raised when curve math would divide by an empty reserve or supply."""


class InvalidComputation(AmmError):
    """Raised when curve math is called outside its domain or breaks an invariant."""


class Unauthorized(AmmError):
    """Raised when a lock/unlock is requested by anyone but the pool authority."""


class PoolAlreadyExists(AmmError):
    """Raised by storage when a pool identity is created twice."""


class PoolNotFound(AmmError):
    """Raised by storage when a pool identity is unknown."""


class LedgerError(Exception):
    """Base class for failures reported by the ledger collaborator."""


class TransferError(LedgerError):
    """Raised when a balance move is rejected (e.g. insufficient source balance)."""


class MintError(LedgerError):
    """Raised when a mint is rejected (e.g. caller lacks minting authority)."""


class BurnError(LedgerError):
    """Raised when a burn is rejected (e.g. holder balance below the burn amount)."""
