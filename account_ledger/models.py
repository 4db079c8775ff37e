"""
Data models for the account ledger.

This module contains the value types passed between accounts, observers and
the directory that drives them.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class OperationResult(Enum):
    """Outcome of a balance mutation."""
    SUCCESS = "success"
    INSUFFICIENT_FUNDS = "insufficient_funds"

    @property
    def succeeded(self) -> bool:
        return self is OperationResult.SUCCESS


class ValidationMode(Enum):
    """How an account treats negative balances and amounts."""
    PERMISSIVE = "permissive"
    STRICT = "strict"


@dataclass(frozen=True)
class AccountSnapshot:
    """Read-only view of an account handed to observers."""

    account_id: int
    balance: Decimal

    def __post_init__(self):
        """Ensure balance is a Decimal."""
        if not isinstance(self.balance, Decimal):
            object.__setattr__(self, 'balance', to_decimal(self.balance))


def to_decimal(value) -> Decimal:
    """Convert an int, float or string amount to Decimal."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
