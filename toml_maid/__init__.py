"""Structural formatter for TOML documents."""

from .nodes import (
    Array,
    ArrayOfTables,
    Decor,
    InlineTable,
    Item,
    Key,
    KeyValue,
    Scalar,
    Table,
    TableEntry,
    Value,
)
from .document import TomlDocument
from .errors import ConfigError, IoError, ParseError, TomlMaidError
from .ranking import KeyRanking
from .reader import TomlReader, read_document
from .writer import TomlWriter, render_document
from .formatter import TomlFormatter, normalize_quotes
from .config import CONFIG_FILE, Config, ProcessedConfig
from .scanner import find_files_recursively
from .driver import FileOutcome, Maid, RunReport

__all__ = [
    "Array",
    "ArrayOfTables",
    "Decor",
    "InlineTable",
    "Item",
    "Key",
    "KeyValue",
    "Scalar",
    "Table",
    "TableEntry",
    "Value",
    "TomlDocument",
    "ConfigError",
    "IoError",
    "ParseError",
    "TomlMaidError",
    "KeyRanking",
    "TomlReader",
    "read_document",
    "TomlWriter",
    "render_document",
    "TomlFormatter",
    "normalize_quotes",
    "CONFIG_FILE",
    "Config",
    "ProcessedConfig",
    "find_files_recursively",
    "FileOutcome",
    "Maid",
    "RunReport",
]
