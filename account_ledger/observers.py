"""
Observers that react to account balance changes.

An account only knows the AccountObserver interface; every concrete kind
below can be subscribed to any number of accounts.
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Callable, List, Optional

import click

from .models import AccountSnapshot, to_decimal


class AccountObserver(ABC):
    """Receives balance change events from the accounts it is subscribed to."""

    @abstractmethod
    def update(self, snapshot: AccountSnapshot) -> None:
        """
        React to a balance change.

        Args:
            snapshot: Account id and balance after the change
        """


class User(AccountObserver):
    """Account holder that prints every balance change."""

    def __init__(self, name: str):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def get_name(self) -> str:
        return self._name

    def update(self, snapshot: AccountSnapshot) -> None:
        click.echo(f"User {self._name}: Account balance changed to {snapshot.balance}")

    def __repr__(self):
        return f"User({self._name!r})"


class LoggingObserver(AccountObserver):
    """Writes balance changes to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.logger = logger or logging.getLogger(__name__)
        self.level = level

    def update(self, snapshot: AccountSnapshot) -> None:
        self.logger.log(self.level, f"Account {snapshot.account_id} balance changed to {snapshot.balance}")


class RecordingObserver(AccountObserver):
    """Collects every snapshot it receives, in order."""

    def __init__(self):
        self.updates: List[AccountSnapshot] = []

    def update(self, snapshot: AccountSnapshot) -> None:
        self.updates.append(snapshot)

    @property
    def call_count(self) -> int:
        return len(self.updates)

    @property
    def last(self) -> Optional[AccountSnapshot]:
        return self.updates[-1] if self.updates else None

    def balances(self) -> List[Decimal]:
        """Balances seen so far, oldest first."""
        return [snapshot.balance for snapshot in self.updates]

    def clear(self) -> None:
        self.updates.clear()


class ThresholdAlertObserver(AccountObserver):
    """Raises an alert whenever a balance drops below a threshold."""

    def __init__(self, threshold: Decimal,
                 callback: Optional[Callable[[AccountSnapshot], None]] = None):
        self.threshold = to_decimal(threshold)
        self.callback = callback
        self.alerts: List[AccountSnapshot] = []
        self.logger = logging.getLogger(__name__)

    def update(self, snapshot: AccountSnapshot) -> None:
        if snapshot.balance >= self.threshold:
            return

        self.alerts.append(snapshot)
        self.logger.warning(
            f"Account {snapshot.account_id} balance {snapshot.balance} is below {self.threshold}"
        )
        if self.callback is not None:
            self.callback(snapshot)
