"""
Exceptions raised by the account ledger.

Insufficient funds is not an error here: withdrawals and transfers report it
through OperationResult.
"""


class LedgerError(Exception):
    """Base class for ledger errors."""


class InvalidAmountError(LedgerError, ValueError):
    """Raised in strict mode for a negative balance or amount."""


class AccountNotFoundError(LedgerError, LookupError):
    """Raised when an account id does not resolve."""

    def __init__(self, account_id: int, role: str = "Account"):
        self.account_id = account_id
        super().__init__(f"{role} not found")


class UserNotFoundError(LedgerError, LookupError):
    """Raised when a user name does not resolve."""

    def __init__(self, name: str):
        self.name = name
        super().__init__("User not found")
