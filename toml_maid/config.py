"""Configuration file model, discovery and loading."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import tomlkit
from pydantic import BaseModel, Field, ValidationError
from tomlkit.exceptions import TOMLKitError

from .errors import ConfigError
from .formatter import TomlFormatter
from .ranking import KeyRanking

CONFIG_FILE = "toml-maid.toml"

logger = logging.getLogger(__name__)


class Config(BaseModel):
    """Content of a ``toml-maid.toml`` file."""

    # Important keys in standard tables, sorted first in this order.
    keys: list[str] = Field(default_factory=list)
    # Important keys in inline tables.
    inline_keys: list[str] = Field(default_factory=list)
    # Sort string values of arrays; other values keep their order after the strings.
    sort_arrays: bool = False
    # Globs of paths to skip when scanning folders, relative to the scanned folder.
    excludes: list[str] = Field(default_factory=list)

    @classmethod
    def find(cls, start: str | Path | None = None) -> Path | None:
        """Look for the configuration file in ``start`` and its parents."""
        directory = Path(start or Path.cwd()).resolve()
        for candidate in (directory, *directory.parents):
            path = candidate / CONFIG_FILE
            if path.is_file():
                return path
        return None

    @classmethod
    def load(cls, path: str | Path) -> Config:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(str(exc), path) from exc
        try:
            data = tomlkit.parse(text).unwrap()
        except TOMLKitError as exc:
            raise ConfigError(str(exc), path) from exc
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc), path) from exc

    @classmethod
    def discover(cls, start: str | Path | None = None) -> tuple[Config, Path | None]:
        """Load the closest configuration file, or the defaults when there is none."""
        path = cls.find(start)
        if path is None:
            return cls(), None
        return cls.load(path), path

    def process(self) -> ProcessedConfig:
        return ProcessedConfig.from_config(self)


@dataclass
class ProcessedConfig:
    """Configuration with key lists turned into rankings."""

    keys: KeyRanking = field(default_factory=KeyRanking)
    inline_keys: KeyRanking = field(default_factory=KeyRanking)
    sort_arrays: bool = False
    excludes: list[str] = field(default_factory=list)

    @classmethod
    def from_config(cls, config: Config) -> ProcessedConfig:
        processed = cls(
            keys=KeyRanking.from_keys(config.keys),
            inline_keys=KeyRanking.from_keys(config.inline_keys),
            sort_arrays=config.sort_arrays,
            excludes=list(config.excludes),
        )
        for name, ranking in (("keys", processed.keys), ("inline_keys", processed.inline_keys)):
            if ranking.duplicates:
                logger.warning(
                    f"Duplicate entries in '{name}': {', '.join(ranking.duplicates)}; the last occurrence sets the rank"
                )
        return processed

    def formatter(self) -> TomlFormatter:
        return TomlFormatter(keys=self.keys, inline_keys=self.inline_keys, sort_arrays=self.sort_arrays)


__all__ = ["CONFIG_FILE", "Config", "ProcessedConfig"]
