"""
Configuration for the account ledger.

Defaults live here as module constants; the CLI overrides them from its
options and environment variables.
"""

import logging
from dataclasses import dataclass

from .models import ValidationMode

DEFAULT_MODE = ValidationMode.PERMISSIVE
DEFAULT_CURRENCY_SYMBOL = ""
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

ENV_STRICT = "LEDGER_STRICT"
ENV_LOG_LEVEL = "LEDGER_LOG_LEVEL"
ENV_CURRENCY = "LEDGER_CURRENCY"


@dataclass
class LedgerConfig:
    """Settings shared by the directory and the CLI."""

    mode: ValidationMode = DEFAULT_MODE
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        if not isinstance(self.mode, ValidationMode):
            self.mode = ValidationMode(self.mode)
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

    @property
    def strict(self) -> bool:
        return self.mode is ValidationMode.STRICT


def configure_logging(config: LedgerConfig) -> None:
    """Install a root handler at the configured level."""
    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
    logging.getLogger().setLevel(config.log_level)
