"""Decor-preserving TOML reader.

``tomlkit`` validates the whole document and decodes scalar literals. This
module walks the same text and keeps every run of whitespace and comments with
the key, value or header it belongs to:

- lines before a key (blank lines, comments, indentation) are the key prefix,
  the spaces before ``=`` the key suffix;
- the spaces after ``=`` are the value prefix, the rest of the line (spaces and
  a comment) the value suffix;
- lines before a ``[header]`` and the rest of the header line decorate the table;
- anything after the last entry of the file is the document trailing text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NotRequired, TypedDict

import tomlkit
from tomlkit import items
from tomlkit.exceptions import TOMLKitError

from .document import TomlDocument
from .errors import ParseError
from .nodes import Array, ArrayOfTables, Decor, InlineTable, Key, KeyValue, Scalar, ScalarType, Table, Value
from .utils import resolve_config

BARE_KEY_CHARS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-")
SCALAR_TERMINATORS = frozenset(",]}#\r\n")
SPACES = frozenset(" \t")
TRIVIA = frozenset(" \t\r\n")


class ReaderConfig(TypedDict):
    validate: NotRequired[bool]


class ReaderConfigRequired(TypedDict):
    validate: bool


DEFAULT_CONFIG: ReaderConfigRequired = {"validate": True}


@dataclass(slots=True)
class _Capture:
    """An array of tables being copied verbatim."""

    path: tuple[str, ...]
    target: ArrayOfTables
    start: int
    # Continue the last element instead of starting a new one.
    extend: bool = False


class TomlReader:
    def __init__(self, text: str, config: ReaderConfig | None = None):
        self.text = text
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = logging.getLogger(__name__)
        self._pos = 0
        self._line = 1
        self._column = 1

    def read(self) -> TomlDocument:
        if self.config["validate"]:
            self._validate()
        document = TomlDocument()
        current = document.root
        capture: _Capture | None = None

        while True:
            start = self._pos
            trivia = self._consume_trivia()
            if self._is_eof:
                if capture is not None:
                    self._close_capture(capture, start)
                document.trailing = trivia
                break

            if self._peek() != "[":
                key, value = self._read_pair(trivia)
                value.decor = Decor(prefix=value.decor.prefix, suffix=self._consume_line_end())
                if capture is None:
                    current.add_entry(key, value)
                continue

            is_aot = self._peek(1) == "["
            raw_path, path, suffix = self._read_header(is_aot)
            self.logger.debug(f"Read header {'.'.join(raw_path)} at line {self._line - 1}")

            if capture is not None:
                if len(path) > len(capture.path) and tuple(path[: len(capture.path)]) == capture.path:
                    continue
                self._close_capture(capture, start)
                capture = None

            found = self._resolve(document.root, raw_path[:-1], path[:-1])
            if isinstance(found, tuple):
                target, aot_path = found
                capture = _Capture(path=aot_path, target=target, start=start, extend=True)
                continue

            existing = found.get(path[-1])
            if is_aot:
                if existing is None:
                    existing = found.add_entry(Key(raw=raw_path[-1], name=path[-1]), ArrayOfTables())
                elif not isinstance(existing, ArrayOfTables):
                    raise self._error(f"Key '{'.'.join(path)}' is already defined")
                capture = _Capture(path=tuple(path), target=existing, start=start)
                continue

            decor = Decor(prefix=trivia, suffix=suffix)
            if existing is None:
                current = found.add_entry(Key(raw=raw_path[-1], name=path[-1]), Table(decor=decor))
            elif isinstance(existing, Table) and existing.implicit:
                existing.decor = decor
                existing.implicit = False
                current = existing
            else:
                raise self._error(f"Table '{'.'.join(path)}' is already defined")

        return document

    # Structure -----------------------------------------------------------------
    def _resolve(
        self, root: Table, raw_path: list[str], path: list[str]
    ) -> Table | tuple[ArrayOfTables, tuple[str, ...]]:
        table = root
        for depth, (raw, name) in enumerate(zip(raw_path, path)):
            found = table.get(name)
            if found is None:
                found = table.add_entry(Key(raw=raw, name=name), Table(implicit=True))
            if isinstance(found, ArrayOfTables):
                return found, tuple(path[: depth + 1])
            if not isinstance(found, Table):
                raise self._error(f"Key '{name}' is not a table")
            table = found
        return table

    def _close_capture(self, capture: _Capture, end: int) -> None:
        chunk = self.text[capture.start : end]
        if capture.extend and capture.target.blocks:
            capture.target.blocks[-1] += chunk
        else:
            capture.target.blocks.append(chunk)

    def _read_header(self, is_aot: bool) -> tuple[list[str], list[str], str]:
        self._expect("[")
        if is_aot:
            self._expect("[")
        self._consume_spaces()
        raw_path: list[str] = []
        path: list[str] = []
        while True:
            start = self._pos
            path.append(self._read_simple_key())
            raw_path.append(self.text[start : self._pos])
            self._consume_spaces()
            if self._peek() != ".":
                break
            self._advance()
            self._consume_spaces()
        self._expect("]")
        if is_aot:
            self._expect("]")
        return raw_path, path, self._consume_line_end()

    # Keys ----------------------------------------------------------------------
    def _read_pair(self, prefix: str) -> tuple[Key, Value]:
        raw, parts = self._read_key()
        key_suffix = self._consume_spaces()
        self._expect("=")
        value_prefix = self._consume_spaces()
        value = self._read_value()
        value.decor = Decor(prefix=value_prefix)
        key = Key(raw=raw, name=".".join(parts), decor=Decor(prefix=prefix, suffix=key_suffix))
        return key, value

    def _read_key(self) -> tuple[str, list[str]]:
        start = self._pos
        parts: list[str] = []
        while True:
            parts.append(self._read_simple_key())
            end = self._pos
            self._consume_spaces()
            if self._peek() != ".":
                break
            self._advance()
            self._consume_spaces()
        self._rewind(end)
        return self.text[start:end], parts

    def _read_simple_key(self) -> str:
        char = self._peek()
        if char in ('"', "'"):
            start = self._pos
            self._read_quoted(char)
            return self._decode(self.text[start : self._pos])
        start = self._pos
        while not self._is_eof and self._peek() in BARE_KEY_CHARS:
            self._advance()
        if start == self._pos:
            raise self._error(f"Expected a key, found {char!r}")
        return self.text[start : self._pos]

    # Values --------------------------------------------------------------------
    def _read_value(self) -> Value:
        char = self._peek()
        if char == "[":
            return self._read_array()
        if char == "{":
            return self._read_inline_table()
        start = self._pos
        if char in ('"', "'"):
            if self.text.startswith(char * 3, self._pos):
                self._read_multiline(char)
            else:
                self._read_quoted(char)
            raw = self.text[start : self._pos]
        else:
            while not self._is_eof and self._peek() not in SCALAR_TERMINATORS:
                self._advance()
            raw = self.text[start : self._pos].rstrip(" \t")
            self._rewind(start + len(raw))
            if not raw:
                raise self._error("Expected a value")
        return self._scalar(raw)

    def _read_array(self) -> Array:
        self._expect("[")
        array = Array()
        while True:
            prefix = self._consume_trivia()
            if self._peek() == "]":
                self._advance()
                array.trailing = prefix
                # Only reached right after "[" or after a comma.
                array.trailing_comma = bool(array.values)
                return array
            value = self._read_value()
            value.decor = Decor(prefix=prefix, suffix=self._consume_trivia())
            array.values.append(value)
            if self._peek() == ",":
                self._advance()
                continue
            self._expect("]")
            return array

    def _read_inline_table(self) -> InlineTable:
        self._expect("{")
        table = InlineTable()
        while True:
            prefix = self._consume_trivia()
            if self._peek() == "}":
                self._advance()
                return table
            key, value = self._read_pair(prefix)
            value.decor = Decor(prefix=value.decor.prefix, suffix=self._consume_trivia())
            table.entries.append(KeyValue(key=key, value=value))
            if self._peek() == ",":
                self._advance()
                continue
            self._expect("}")
            return table

    def _read_quoted(self, quote: str) -> None:
        self._advance()
        while True:
            char = self._peek()
            if self._is_eof or char == "\n":
                raise self._error("Unterminated string")
            self._advance()
            if char == quote:
                return
            if char == "\\" and quote == '"':
                self._advance()

    def _read_multiline(self, quote: str) -> None:
        delimiter = quote * 3
        self._advance(3)
        while not self._is_eof:
            if self.text.startswith(delimiter, self._pos):
                # Up to two quotes may sit right before the closing delimiter.
                count = 0
                while count < 5 and self._peek() == quote:
                    self._advance()
                    count += 1
                return
            char = self._advance()
            if char == "\\" and quote == '"':
                self._advance()
        raise self._error("Unterminated multi-line string")

    def _scalar(self, raw: str) -> Scalar:
        try:
            parsed = tomlkit.value(raw)
        except TOMLKitError as exc:
            raise self._error(f"Invalid value {raw!r}") from exc
        if isinstance(parsed, items.String):
            return Scalar(raw=raw, scalar_type="string", text=str(parsed))
        scalar_type: ScalarType
        if isinstance(parsed, items.Bool):
            scalar_type = "boolean"
        elif isinstance(parsed, items.Integer):
            scalar_type = "integer"
        elif isinstance(parsed, items.Float):
            scalar_type = "float"
        elif isinstance(parsed, (items.DateTime, items.Date, items.Time)):
            scalar_type = "datetime"
        else:
            raise self._error(f"Unsupported value {raw!r}")
        return Scalar(raw=raw, scalar_type=scalar_type)

    def _decode(self, raw: str) -> str:
        try:
            return str(tomlkit.value(raw))
        except TOMLKitError as exc:
            raise self._error(f"Invalid key {raw!r}") from exc

    # Trivia --------------------------------------------------------------------
    def _consume_trivia(self) -> str:
        """Whitespace, line breaks and comments."""
        start = self._pos
        while not self._is_eof:
            char = self._peek()
            if char in TRIVIA:
                self._advance()
            elif char == "#":
                self._consume_comment()
            else:
                break
        return self.text[start : self._pos]

    def _consume_spaces(self) -> str:
        start = self._pos
        while not self._is_eof and self._peek() in SPACES:
            self._advance()
        return self.text[start : self._pos]

    def _consume_comment(self) -> None:
        while not self._is_eof and self._peek() != "\n":
            self._advance()

    def _consume_line_end(self) -> str:
        """Rest of the current line, without the line break, which is consumed."""
        start = self._pos
        self._consume_spaces()
        if self._peek() == "#":
            self._consume_comment()
        suffix = self.text[start : self._pos]
        if self._peek() == "\r" and self._peek(1) == "\n":
            self._advance()
        if self._peek() == "\n":
            self._advance()
        elif not self._is_eof:
            raise self._error(f"Expected end of line, found {self._peek()!r}")
        return suffix

    def _validate(self) -> None:
        try:
            tomlkit.parse(self.text)
        except TOMLKitError as exc:
            raise _host_error(exc) from exc

    # Helpers -------------------------------------------------------------------
    def _error(self, message: str) -> ParseError:
        return ParseError(message, self._line, self._column)

    def _expect(self, char: str) -> None:
        if self._peek() != char:
            found = "end of file" if self._is_eof else repr(self._peek())
            raise self._error(f"Expected '{char}', found {found}")
        self._advance()

    @property
    def _is_eof(self) -> bool:
        return self._pos >= len(self.text)

    def _peek(self, ahead: int = 0) -> str:
        index = self._pos + ahead
        if index >= len(self.text):
            return "\0"
        return self.text[index]

    def _advance(self, steps: int = 1) -> str:
        char = ""
        for _ in range(steps):
            if self._is_eof:
                break
            char = self.text[self._pos]
            self._pos += 1
            if char == "\n":
                self._line += 1
                self._column = 1
            else:
                self._column += 1
        return char

    def _rewind(self, position: int) -> None:
        """Step back over characters of the current line."""
        self._column -= self._pos - position
        self._pos = position


def _host_error(exc: TOMLKitError) -> ParseError:
    line = getattr(exc, "line", None)
    column = getattr(exc, "col", None)
    message = str(exc)
    location = f" at line {line} col {column}"
    if line is not None and message.endswith(location):
        message = message[: -len(location)]
    return ParseError(message, line, column)


def read_document(text: str, config: ReaderConfig | None = None) -> TomlDocument:
    return TomlReader(text, config).read()


__all__ = ["TomlReader", "ReaderConfig", "read_document"]
