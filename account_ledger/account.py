"""
Accounts and account id allocation.

An Account owns its balance and the list of observers subscribed to it.
It is the only thing that mutates its balance, and every successful mutation
is followed by a notification of its observers.
"""

import itertools
import logging
import threading
from contextlib import ExitStack, contextmanager
from decimal import Decimal
from typing import List, Tuple

from .errors import InvalidAmountError
from .models import AccountSnapshot, OperationResult, ValidationMode, to_decimal
from .observers import AccountObserver

logger = logging.getLogger(__name__)


class IdAllocator:
    """Hands out strictly increasing account ids, starting at 1 by default."""

    def __init__(self, start: int = 1):
        if start < 1:
            raise ValueError("Account ids must be positive")
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        """Return an id that has never been returned by this allocator."""
        with self._lock:
            return next(self._counter)


def validate_amount(amount, mode: ValidationMode, label: str = "Amount") -> Decimal:
    """
    Convert an amount to Decimal and check it against the validation mode.

    Args:
        amount: Value to convert
        mode: PERMISSIVE accepts anything numeric, STRICT rejects negatives
        label: Name used in the error message

    Returns:
        The amount as a Decimal

    Raises:
        InvalidAmountError: If the value is not a number, or is negative in strict mode
    """
    try:
        value = to_decimal(amount)
    except ArithmeticError:
        raise InvalidAmountError(f"{label} is not a number: {amount!r}")

    if not value.is_finite():
        raise InvalidAmountError(f"{label} must be finite")

    if mode is ValidationMode.STRICT and value < 0:
        raise InvalidAmountError(f"{label} cannot be negative")

    return value


class Account:
    """A balance with an identity and a list of subscribed observers."""

    def __init__(self, account_id: int, initial_balance: Decimal = Decimal('0.00'),
                 mode: ValidationMode = ValidationMode.PERMISSIVE):
        if account_id < 1:
            raise ValueError("Account id must be positive")

        self._id = account_id
        self._mode = mode
        self._balance = validate_amount(initial_balance, mode, "Initial balance")
        self._observers: List[AccountObserver] = []
        self._lock = threading.Lock()

    @classmethod
    def create(cls, initial_balance, id_allocator: IdAllocator,
               mode: ValidationMode = ValidationMode.PERMISSIVE) -> "Account":
        """
        Create an account with a fresh id.

        Args:
            initial_balance: Opening balance; negative values are accepted in permissive mode
            id_allocator: Source of the account id
            mode: Validation mode for this account

        Returns:
            The new account
        """
        balance = validate_amount(initial_balance, mode, "Initial balance")
        account = cls(id_allocator.next_id(), balance, mode)
        logger.debug(f"Created account {account.id} with balance {balance}")
        return account

    @property
    def id(self) -> int:
        return self._id

    @property
    def mode(self) -> ValidationMode:
        return self._mode

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def observers(self) -> Tuple[AccountObserver, ...]:
        with self._lock:
            return tuple(self._observers)

    def get_balance(self) -> Decimal:
        """Get current balance."""
        return self._balance

    def snapshot(self) -> AccountSnapshot:
        """Get a read-only view of the current state."""
        with self._lock:
            return self._snapshot()

    def deposit(self, amount) -> OperationResult:
        """Add money to the account and notify observers."""
        amount = validate_amount(amount, self._mode, "Deposit amount")

        with self._lock:
            snapshot = self._credit(amount)

        self._notify(snapshot)
        return OperationResult.SUCCESS

    def withdraw(self, amount) -> OperationResult:
        """
        Take money out of the account.

        Nothing changes and nobody is notified when the amount exceeds the balance.
        """
        amount = validate_amount(amount, self._mode, "Withdrawal amount")

        with self._lock:
            if amount > self._balance:
                logger.info(f"Rejected withdrawal of {amount} from account {self._id}: "
                            f"balance is {self._balance}")
                return OperationResult.INSUFFICIENT_FUNDS

            self._balance -= amount
            snapshot = self._snapshot()

        logger.debug(f"Withdrew {amount} from account {self._id}, balance {snapshot.balance}")
        self._notify(snapshot)
        return OperationResult.SUCCESS

    def transfer(self, amount, target: "Account") -> OperationResult:
        """
        Move money from this account to target.

        The balance check runs once, on this account, before anything changes.
        When it passes, the target is credited and its observers notified,
        then this account's observers are notified. When it fails, neither
        account changes and nobody is notified.
        """
        amount = validate_amount(amount, self._mode, "Transfer amount")
        amount = validate_amount(amount, target.mode, "Transfer amount")

        with self._locked_with(target):
            if amount > self._balance:
                logger.info(f"Rejected transfer of {amount} from account {self._id} "
                            f"to account {target.id}: balance is {self._balance}")
                return OperationResult.INSUFFICIENT_FUNDS

            self._balance -= amount
            target_snapshot = target._credit(amount)
            source_snapshot = self._snapshot()

        logger.debug(f"Transferred {amount} from account {self._id} to account {target.id}")
        target._notify(target_snapshot)
        self._notify(source_snapshot)
        return OperationResult.SUCCESS

    def subscribe(self, observer: AccountObserver) -> None:
        """Add an observer; the same observer may be added more than once."""
        with self._lock:
            self._observers.append(observer)

    def unsubscribe(self, observer: AccountObserver) -> bool:
        """
        Remove the first subscription of observer.

        Returns:
            True if a subscription was removed, False if observer was not subscribed
        """
        with self._lock:
            for index, subscribed in enumerate(self._observers):
                if subscribed is observer:
                    del self._observers[index]
                    return True
        return False

    def notify(self) -> None:
        """Send the current state to every observer, in subscription order."""
        self._notify(self.snapshot())

    def _credit(self, amount: Decimal) -> AccountSnapshot:
        # Caller holds self._lock.
        self._balance += amount
        logger.debug(f"Credited {amount} to account {self._id}, balance {self._balance}")
        return self._snapshot()

    def _snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(account_id=self._id, balance=self._balance)

    def _notify(self, snapshot: AccountSnapshot) -> None:
        # Iterate over a copy: observers may subscribe or unsubscribe while being notified.
        with self._lock:
            observers = list(self._observers)

        for observer in observers:
            observer.update(snapshot)

    @contextmanager
    def _locked_with(self, other: "Account"):
        """Hold the locks of both accounts, acquired in ascending id order; equal ids fall back to object identity."""
        accounts = [self] if other is self else sorted((self, other), key=lambda a: (a.id, id(a)))
        with ExitStack() as stack:
            for account in accounts:
                stack.enter_context(account._lock)
            yield

    def __repr__(self):
        return f"Account(id={self._id}, balance={self._balance})"
