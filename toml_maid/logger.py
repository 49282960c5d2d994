import logging
from typing import NotRequired, TypedDict

from colorama import Fore, Style

from toml_maid.utils import resolve_config


class LoggerConfig(TypedDict):
    name: NotRequired[str]
    is_enabled: NotRequired[bool]
    level: NotRequired[int]
    format: NotRequired[str]
    colored: NotRequired[bool]


class LoggerConfigRequired(TypedDict):
    name: str
    is_enabled: bool
    level: int
    format: str
    colored: bool


DEFAULT_LOGGER_CONFIG: LoggerConfigRequired = {
    "name": "toml_maid",
    "is_enabled": True,
    "level": logging.WARNING,
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "colored": False,
}

# Outcome names are the values of driver.FileOutcome.
OUTCOME_COLORS = {
    "unchanged": Fore.GREEN,
    "check_passed": Fore.GREEN,
    "overwritten": Fore.BLUE,
    "check_failed": Fore.RED,
}

LEVEL_COLORS = {
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED,
}


class OutcomeFormatter(logging.Formatter):
    """Colours records by their ``outcome`` attribute, falling back to the level."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        outcome = getattr(record, "outcome", None)
        color = OUTCOME_COLORS.get(getattr(outcome, "value", outcome)) or LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{Style.RESET_ALL}"


class Logger:
    def __init__(self, config: LoggerConfig | None = None):
        self.config = resolve_config(config or {}, DEFAULT_LOGGER_CONFIG)
        self.logger = logging.getLogger(self.config["name"])
        self.set_configuration()

    def set_configuration(self):
        if not self.config["is_enabled"]:
            self.logger.disabled = True
            return

        self.logger.disabled = False
        self.logger.setLevel(self.config["level"])
        if self.config["colored"]:
            self.formatter = OutcomeFormatter(self.config["format"])
        else:
            self.formatter = logging.Formatter(self.config["format"])
        # Loggers are process-wide; replace the handler installed by an earlier instance.
        for handler in [h for h in self.logger.handlers if getattr(h, "_toml_maid", False)]:
            self.logger.removeHandler(handler)
        self.ch = logging.StreamHandler()
        self.ch._toml_maid = True
        self.ch.setFormatter(self.formatter)
        self.logger.addHandler(self.ch)
