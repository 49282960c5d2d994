"""Error taxonomy shared by the reader, the configuration loader and the file driver."""

from __future__ import annotations

from pathlib import Path


class TomlMaidError(Exception):
    pass


class IoError(TomlMaidError):
    """A document could not be read or written."""

    def __init__(self, path: str | Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Error while accessing file \"{self.path}\": {reason}")


class ParseError(TomlMaidError):
    """The document violates the TOML grammar."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        path: str | Path | None = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        self.path = Path(path) if path is not None else None
        if line is not None:
            message = f"{message} at line {line}, column {column}"
        if self.path is not None:
            message = f"{self.path}: {message}"
        super().__init__(message)

    def with_path(self, path: str | Path) -> ParseError:
        return ParseError(self.message, self.line, self.column, path)


class ConfigError(TomlMaidError):
    """The configuration file is malformed; sort order cannot be trusted."""

    def __init__(self, message: str, path: str | Path | None = None):
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            message = f"Invalid configuration in \"{self.path}\": {message}"
        super().__init__(message)


__all__ = ["TomlMaidError", "IoError", "ParseError", "ConfigError"]
