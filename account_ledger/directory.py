"""
Directory of users and accounts.

This module resolves user names and account ids to objects and drives the
Account API on their behalf.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from .account import Account, IdAllocator
from .config import LedgerConfig
from .errors import AccountNotFoundError, UserNotFoundError
from .models import OperationResult
from .observers import AccountObserver, User


class LedgerDirectory:
    """Owns the users and accounts created during a session."""

    def __init__(self, config: Optional[LedgerConfig] = None,
                 id_allocator: Optional[IdAllocator] = None):
        """Initialize an empty directory."""
        self.config = config or LedgerConfig()
        self.id_allocator = id_allocator or IdAllocator()
        self.users: List[User] = []
        self.accounts: List[Account] = []
        self.logger = logging.getLogger(__name__)

    def create_user(self, name: str) -> User:
        """Create a new user."""
        if not name or not name.strip():
            raise ValueError("User name cannot be empty")

        user = User(name.strip())
        self.users.append(user)
        self.logger.info(f"Created user {user.name}")
        return user

    def find_user(self, name: str) -> Optional[User]:
        """Get the first user with the given name."""
        name = name.strip()
        for user in self.users:
            if user.get_name() == name:
                return user
        return None

    def create_account(self, user_name: str, initial_balance: Decimal) -> Account:
        """
        Create an account and subscribe its user to it.

        Args:
            user_name: Name of an existing user
            initial_balance: Opening balance

        Returns:
            The new account

        Raises:
            UserNotFoundError: If no user has that name
            InvalidAmountError: If the balance is rejected in strict mode
        """
        if not self.users:
            raise ValueError("No users found. Please create a user first.")

        user = self.find_user(user_name)
        if user is None:
            raise UserNotFoundError(user_name)

        account = Account.create(initial_balance, self.id_allocator, self.config.mode)
        account.subscribe(user)
        self.accounts.append(account)
        self.logger.info(f"Created account {account.id} for user {user.name}")
        return account

    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        for account in self.accounts:
            if account.id == account_id:
                return account
        return None

    def require_account(self, account_id: int, role: str = "Account") -> Account:
        """Get account by ID, raising if it does not exist."""
        if not self.accounts:
            raise ValueError("No accounts found. Please create an account first.")

        account = self.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id, role)
        return account

    def deposit(self, account_id: int, amount: Decimal) -> OperationResult:
        """Deposit money to an account."""
        return self.require_account(account_id).deposit(amount)

    def withdraw(self, account_id: int, amount: Decimal) -> OperationResult:
        """Withdraw money from an account."""
        return self.require_account(account_id).withdraw(amount)

    def transfer(self, source_id: int, target_id: int, amount: Decimal) -> OperationResult:
        """Transfer money between accounts."""
        if len(self.accounts) < 2:
            raise ValueError("At least two accounts are required to perform a transfer.")

        source = self.require_account(source_id, "Source account")
        target = self.require_account(target_id, "Target account")
        return source.transfer(amount, target)

    def check_balance(self, account_id: int) -> Decimal:
        """Get account balance."""
        return self.require_account(account_id).get_balance()

    def subscribe(self, observer: AccountObserver, account_id: int) -> None:
        """Subscribe any observer to an account."""
        self.require_account(account_id).subscribe(observer)

    def subscribe_user(self, user_name: str, account_id: int) -> User:
        """Subscribe a named user to an account."""
        user = self.find_user(user_name)
        if user is None:
            raise UserNotFoundError(user_name)

        self.subscribe(user, account_id)
        return user

    def unsubscribe(self, observer: AccountObserver, account_id: int) -> bool:
        """Remove one subscription of any observer from an account."""
        return self.require_account(account_id).unsubscribe(observer)

    def unsubscribe_user(self, user_name: str, account_id: int) -> bool:
        """Remove one subscription of a named user from an account."""
        user = self.find_user(user_name)
        if user is None:
            raise UserNotFoundError(user_name)

        return self.unsubscribe(user, account_id)

    def total_balance(self) -> Decimal:
        """Sum of all account balances."""
        return sum((account.get_balance() for account in self.accounts), Decimal('0.00'))
