"""
Account Ledger

An in-memory ledger of accounts that notify subscribed observers whenever
their balance changes. Supports deposits, withdrawals and transfers, with an
interactive CLI menu.
"""

__version__ = "0.1.0"
__author__ = "Developer"
__email__ = "dev@example.com"

from typing import Optional

from .models import AccountSnapshot, OperationResult, ValidationMode
from .errors import AccountNotFoundError, InvalidAmountError, LedgerError, UserNotFoundError
from .config import LedgerConfig
from .observers import (
    AccountObserver,
    LoggingObserver,
    RecordingObserver,
    ThresholdAlertObserver,
    User,
)
from .account import Account, IdAllocator
from .directory import LedgerDirectory
from .cli import main


def create_directory(strict: bool = False, config: Optional[LedgerConfig] = None) -> LedgerDirectory:
    """
    Create a LedgerDirectory with its own id allocator.

    Args:
        strict: Reject negative balances and amounts
        config: Full configuration; overrides strict when given

    Returns:
        LedgerDirectory instance
    """
    if config is None:
        config = LedgerConfig(mode=ValidationMode.STRICT if strict else ValidationMode.PERMISSIVE)
    return LedgerDirectory(config, IdAllocator())


__all__ = [
    "Account",
    "AccountNotFoundError",
    "AccountObserver",
    "AccountSnapshot",
    "IdAllocator",
    "InvalidAmountError",
    "LedgerConfig",
    "LedgerDirectory",
    "LedgerError",
    "LoggingObserver",
    "OperationResult",
    "RecordingObserver",
    "ThresholdAlertObserver",
    "User",
    "UserNotFoundError",
    "ValidationMode",
    "create_directory",
    "main"
]
