"""
CLI interface for the account ledger.

This module provides the interactive menu used to create users and accounts
and to move money between accounts during a session.
"""

import click
from decimal import Decimal, InvalidOperation
from typing import Optional

from .config import (
    DEFAULT_CURRENCY_SYMBOL,
    DEFAULT_LOG_LEVEL,
    ENV_CURRENCY,
    ENV_LOG_LEVEL,
    ENV_STRICT,
    LedgerConfig,
    configure_logging,
)
from .directory import LedgerDirectory
from .errors import AccountNotFoundError, LedgerError
from .models import OperationResult, ValidationMode

MENU_OPTIONS = [
    "Create User",
    "Create Account",
    "Deposit",
    "Withdraw",
    "Transfer",
    "Check Balance",
    "Exit",
]
EXIT_OPTION = len(MENU_OPTIONS)
LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class LedgerCLI:
    """Interactive front end over a LedgerDirectory."""

    def __init__(self, config: Optional[LedgerConfig] = None):
        """Initialize CLI with an empty directory."""
        self.config = config or LedgerConfig()
        self.directory = LedgerDirectory(self.config)
        self.handlers = {
            1: self.create_user,
            2: self.create_account,
            3: self.deposit,
            4: self.withdraw,
            5: self.transfer,
            6: self.check_balance,
        }

    def format_currency(self, amount: Decimal) -> str:
        """Format currency for display."""
        formatted = f"{amount:,.2f}"
        if self.config.currency_symbol:
            formatted = f"{formatted} {self.config.currency_symbol}"
        return formatted

    def parse_currency(self, amount_str: str) -> Decimal:
        """Parse currency input."""
        try:
            clean_str = amount_str.replace(',', '').strip()
            if self.config.currency_symbol:
                clean_str = clean_str.replace(self.config.currency_symbol, '').strip()
            value = Decimal(clean_str)
        except (InvalidOperation, ValueError):
            raise ValueError(f"Invalid amount: {amount_str}")

        if not value.is_finite():
            raise ValueError(f"Invalid amount: {amount_str}")
        return value

    def parse_id(self, id_str: str) -> int:
        """Parse an account id."""
        try:
            return int(id_str.strip())
        except ValueError:
            raise ValueError(f"Invalid account ID: {id_str}")

    def ask(self, text: str) -> str:
        return click.prompt(text, default='', show_default=False)

    def run_menu(self):
        """Show the menu until the user picks Exit."""
        while True:
            click.echo("\n========== Bank System ==========")
            for number, label in enumerate(MENU_OPTIONS, start=1):
                click.echo(f"{number}. {label}")

            choice = self.ask("Enter option number")
            try:
                option = int(choice.strip())
            except ValueError:
                click.echo("Invalid input. Please try again.")
                continue

            if option == EXIT_OPTION:
                click.echo("Exiting...")
                return

            handler = self.handlers.get(option)
            if handler is None:
                click.echo("Invalid option. Please try again.")
                continue

            try:
                handler()
            except (ValueError, LedgerError) as e:
                click.echo(f"❌ Error: {e}", err=True)

    def create_user(self):
        name = self.ask("Enter user name")
        user = self.directory.create_user(name)
        click.echo(f"✅ User {user.name} created successfully.")

    def create_account(self):
        if not self.directory.users:
            click.echo("No users found. Please create a user first.")
            return

        name = self.ask("Enter user name")
        if self.directory.find_user(name) is None:
            click.echo("User not found.")
            return

        try:
            balance = self.parse_currency(self.ask("Enter initial balance"))
        except ValueError:
            click.echo("Invalid balance amount.")
            return

        account = self.directory.create_account(name, balance)
        click.echo(f"✅ Account created successfully. Account ID: {account.id}")

    def deposit(self):
        account_id = self._prompt_account("Enter account ID")
        if account_id is None:
            return

        try:
            amount = self.parse_currency(self.ask("Enter deposit amount"))
        except ValueError:
            click.echo("Invalid deposit amount.")
            return

        self.directory.deposit(account_id, amount)
        click.echo("✅ Deposit successful.")

    def withdraw(self):
        account_id = self._prompt_account("Enter account ID")
        if account_id is None:
            return

        try:
            amount = self.parse_currency(self.ask("Enter withdrawal amount"))
        except ValueError:
            click.echo("Invalid withdrawal amount.")
            return

        result = self.directory.withdraw(account_id, amount)
        self._report(result, "Withdrawal successful.")

    def transfer(self):
        if len(self.directory.accounts) < 2:
            click.echo("At least two accounts are required to perform a transfer.")
            return

        source_id = self._prompt_account("Enter source account ID", "Source account")
        if source_id is None:
            return
        target_id = self._prompt_account("Enter target account ID", "Target account")
        if target_id is None:
            return

        try:
            amount = self.parse_currency(self.ask("Enter transfer amount"))
        except ValueError:
            click.echo("Invalid transfer amount.")
            return

        result = self.directory.transfer(source_id, target_id, amount)
        self._report(result, "Transfer successful.")

    def check_balance(self):
        account_id = self._prompt_account("Enter account ID")
        if account_id is None:
            return

        balance = self.directory.check_balance(account_id)
        click.echo(f"Account balance: {self.format_currency(balance)}")

    def _prompt_account(self, text: str, role: str = "Account") -> Optional[int]:
        """Ask for an account id and check the directory knows it; echo the reason and return None on failure."""
        if not self.directory.accounts:
            click.echo("No accounts found. Please create an account first.")
            return None

        try:
            account_id = self.parse_id(self.ask(text))
        except ValueError:
            click.echo(f"Invalid {role.lower()} ID.")
            return None

        try:
            self.directory.require_account(account_id, role)
        except AccountNotFoundError as e:
            click.echo(f"{e}.")
            return None
        return account_id

    def _report(self, result: OperationResult, success_message: str):
        if result.succeeded:
            click.echo(f"✅ {success_message}")
        else:
            click.echo("❌ Insufficient funds.", err=True)


@click.group(invoke_without_command=True)
@click.option('--strict/--permissive', default=False, envvar=ENV_STRICT,
              help='Reject negative balances and amounts')
@click.option('--currency', default=DEFAULT_CURRENCY_SYMBOL, envvar=ENV_CURRENCY,
              help='Currency symbol shown next to balances')
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False),
              default=DEFAULT_LOG_LEVEL, envvar=ENV_LOG_LEVEL, help='Logging level')
@click.pass_context
def cli(ctx, strict, currency, log_level):
    """Account Ledger CLI"""
    config = LedgerConfig(
        mode=ValidationMode.STRICT if strict else ValidationMode.PERMISSIVE,
        currency_symbol=currency,
        log_level=log_level,
    )
    configure_logging(config)

    ctx.ensure_object(dict)
    ctx.obj['cli'] = LedgerCLI(config)

    if ctx.invoked_subcommand is None:
        ctx.obj['cli'].run_menu()


@cli.command()
@click.pass_context
def menu(ctx):
    """Start the interactive menu."""
    ctx.obj['cli'].run_menu()


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == '__main__':
    main()
