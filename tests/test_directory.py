"""
Tests for the directory module.

This module contains tests for LedgerDirectory: user and account creation,
lookups, and the operations it drives on accounts.
"""

import pytest
from decimal import Decimal

from account_ledger import create_directory
from account_ledger.account import IdAllocator
from account_ledger.config import LedgerConfig
from account_ledger.directory import LedgerDirectory
from account_ledger.errors import AccountNotFoundError, InvalidAmountError, UserNotFoundError
from account_ledger.models import OperationResult, ValidationMode
from account_ledger.observers import RecordingObserver, User


@pytest.fixture
def directory():
    """Create an empty directory."""
    return LedgerDirectory()


@pytest.fixture
def populated(directory):
    """Directory with two users and one account each."""
    directory.create_user("Anna")
    directory.create_user("Boris")
    directory.create_account("Anna", Decimal('100'))
    directory.create_account("Boris", Decimal('0'))
    return directory


class TestUsers:
    """Test user management."""

    def test_create_user(self, directory):
        user = directory.create_user("  Anna ")

        assert isinstance(user, User)
        assert user.name == "Anna"
        assert directory.users == [user]

    def test_create_user_empty_name(self, directory):
        with pytest.raises(ValueError, match="User name cannot be empty"):
            directory.create_user("   ")

    def test_find_user_returns_first_match(self, directory):
        first = directory.create_user("Anna")
        directory.create_user("Anna")

        assert directory.find_user("Anna") is first
        assert directory.find_user("Nobody") is None


class TestAccounts:
    """Test account creation and lookup."""

    def test_create_account_subscribes_user(self, directory, capsys):
        directory.create_user("Anna")

        account = directory.create_account("Anna", Decimal('10'))
        account.deposit(Decimal('5'))

        assert directory.accounts == [account]
        assert "User Anna: Account balance changed to 15" in capsys.readouterr().out

    def test_create_account_without_users(self, directory):
        with pytest.raises(ValueError, match="No users found"):
            directory.create_account("Anna", Decimal('10'))

    def test_create_account_unknown_user(self, directory):
        directory.create_user("Anna")

        with pytest.raises(UserNotFoundError, match="User not found"):
            directory.create_account("Boris", Decimal('10'))

    def test_account_ids_increase(self, populated):
        assert [account.id for account in populated.accounts] == [1, 2]

    def test_injected_allocator(self):
        directory = LedgerDirectory(id_allocator=IdAllocator(start=500))
        directory.create_user("Anna")

        assert directory.create_account("Anna", Decimal('0')).id == 500

    def test_get_account(self, populated):
        assert populated.get_account(2) is populated.accounts[1]
        assert populated.get_account(99) is None

    def test_require_account_unknown(self, populated):
        with pytest.raises(AccountNotFoundError, match="Account not found") as excinfo:
            populated.require_account(99)
        assert excinfo.value.account_id == 99

    def test_require_account_without_accounts(self, directory):
        with pytest.raises(ValueError, match="No accounts found"):
            directory.require_account(1)

    def test_strict_directory_rejects_negative_balance(self):
        directory = create_directory(strict=True)
        directory.create_user("Anna")

        with pytest.raises(InvalidAmountError):
            directory.create_account("Anna", Decimal('-1'))
        assert directory.accounts == []

    def test_permissive_directory_allows_negative_balance(self, directory):
        directory.create_user("Anna")
        account = directory.create_account("Anna", Decimal('-1'))
        assert account.get_balance() == Decimal('-1')


class TestOperations:
    """Test operations driven through the directory."""

    def test_deposit(self, populated):
        assert populated.deposit(2, Decimal('25')) is OperationResult.SUCCESS
        assert populated.check_balance(2) == Decimal('25')

    def test_withdraw(self, populated):
        assert populated.withdraw(1, Decimal('40')) is OperationResult.SUCCESS
        assert populated.withdraw(1, Decimal('61')) is OperationResult.INSUFFICIENT_FUNDS
        assert populated.check_balance(1) == Decimal('60')

    def test_transfer(self, populated):
        assert populated.transfer(1, 2, Decimal('30')) is OperationResult.SUCCESS
        assert populated.check_balance(1) == Decimal('70')
        assert populated.check_balance(2) == Decimal('30')
        assert populated.total_balance() == Decimal('100')

    def test_transfer_needs_two_accounts(self, directory):
        directory.create_user("Anna")
        directory.create_account("Anna", Decimal('10'))

        with pytest.raises(ValueError, match="At least two accounts"):
            directory.transfer(1, 1, Decimal('1'))

    def test_transfer_unknown_accounts(self, populated):
        with pytest.raises(AccountNotFoundError, match="Source account not found"):
            populated.transfer(9, 2, Decimal('1'))
        with pytest.raises(AccountNotFoundError, match="Target account not found"):
            populated.transfer(1, 9, Decimal('1'))
        assert populated.check_balance(1) == Decimal('100')

    def test_operations_on_unknown_account(self, populated):
        with pytest.raises(AccountNotFoundError):
            populated.deposit(42, Decimal('1'))
        with pytest.raises(AccountNotFoundError):
            populated.check_balance(42)


class TestSubscriptions:
    """Test subscribe and unsubscribe through the directory."""

    def test_subscribe_observer(self, populated):
        observer = RecordingObserver()
        populated.subscribe(observer, 1)

        populated.deposit(1, Decimal('1'))

        assert observer.call_count == 1

    def test_unsubscribe_observer(self, populated):
        observer = RecordingObserver()
        populated.subscribe(observer, 1)

        assert populated.unsubscribe(observer, 1) is True
        assert populated.unsubscribe(observer, 1) is False
        populated.deposit(1, Decimal('1'))

        assert observer.call_count == 0

    def test_unsubscribe_observer_unknown_account(self, populated):
        with pytest.raises(AccountNotFoundError):
            populated.unsubscribe(RecordingObserver(), 42)

    def test_subscribe_user_to_second_account(self, populated, capsys):
        populated.subscribe_user("Anna", 2)

        populated.deposit(2, Decimal('5'))

        out = capsys.readouterr().out
        assert "User Anna: Account balance changed to 5" in out
        assert "User Boris: Account balance changed to 5" in out

    def test_unsubscribe_user(self, populated, capsys):
        assert populated.unsubscribe_user("Anna", 1) is True
        assert populated.unsubscribe_user("Anna", 1) is False

        populated.deposit(1, Decimal('5'))

        assert capsys.readouterr().out == ""

    def test_subscribe_unknown_user(self, populated):
        with pytest.raises(UserNotFoundError):
            populated.subscribe_user("Nobody", 1)
        with pytest.raises(UserNotFoundError):
            populated.unsubscribe_user("Nobody", 1)


class TestCreateDirectory:
    """Test the create_directory factory."""

    def test_default_is_permissive(self):
        assert create_directory().config.mode is ValidationMode.PERMISSIVE

    def test_strict_flag(self):
        assert create_directory(strict=True).config.strict is True

    def test_config_overrides_flag(self):
        config = LedgerConfig(mode=ValidationMode.PERMISSIVE)
        assert create_directory(strict=True, config=config).config is config

    def test_directories_have_separate_id_sequences(self):
        first = create_directory()
        second = create_directory()
        first.create_user("Anna")
        second.create_user("Anna")

        first.create_account("Anna", Decimal('0'))
        first.create_account("Anna", Decimal('0'))

        assert second.create_account("Anna", Decimal('0')).id == 1
