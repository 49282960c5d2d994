"""Format/sort engine.

Each ``format_*`` method takes a node and returns a new one; the input tree is
never modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from . import decor
from .nodes import Array, ArrayOfTables, Decor, InlineTable, Item, Key, KeyValue, Scalar, Table, TableEntry, Value
from .ranking import KeyRanking

T = TypeVar("T")


@dataclass(slots=True)
class Entry(Generic[T]):
    """A key, its formatted value and the key decoration, between sort and reinsertion."""

    key: Key
    value: T
    decor: Decor


@dataclass
class TomlFormatter:
    keys: KeyRanking = field(default_factory=KeyRanking)
    inline_keys: KeyRanking = field(default_factory=KeyRanking)
    sort_arrays: bool = False

    def format_table(self, table: Table) -> Table:
        """Format a standard table.

        Blank lines split the entries into sections and sorting never crosses
        a section boundary. The comments and blank lines opening a section stay
        at the start of the section, whichever entry sorts first. Comments
        attached to any other entry move with that entry.
        """
        formatted = Table(
            decor=Decor(prefix=table.decor.prefix, suffix=table.decor.suffix),
            implicit=table.implicit,
        )
        section: list[Entry[Item]] = []
        section_prefix: str | None = None

        for index, entry in enumerate(table.entries):
            key_decor = entry.key.decor
            if index == 0 or decor.is_section_boundary(key_decor.prefix):
                if index > 0:
                    self._flush_section(formatted, section, section_prefix)
                    section = []
                block, indent = decor.split_indent(key_decor.prefix)
                section_prefix = block or None
                key_decor = Decor(prefix=indent, suffix=key_decor.suffix)

            key_decor = Decor(prefix=key_decor.prefix, suffix=decor.strip_trailing_newlines(key_decor.suffix))
            section.append(Entry(key=entry.key, value=self.format_item(entry.item), decor=key_decor))

        self._flush_section(formatted, section, section_prefix)
        return formatted

    def format_item(self, item: Item) -> Item:
        if isinstance(item, Table):
            return self.format_table(item)
        if isinstance(item, ArrayOfTables):
            return item
        if isinstance(item, (Scalar, Array, InlineTable)):
            return self.format_value(item, last=False)
        raise TypeError(f"Unknown item type: {type(item).__name__}")

    def format_inline_table(self, table: InlineTable, last: bool) -> InlineTable:
        """Format ``{ key = value, ... }``.

        Inline tables hold no comments, so every key gets exactly one space on
        each side and the entries are sorted as a single section.
        """
        entries = [
            Entry(key=entry.key, value=entry.value, decor=Decor(prefix=" ", suffix=" "))
            for entry in table.entries
        ]
        entries.sort(key=lambda entry: self.inline_keys.sort_key(entry.key.name))

        formatted: list[KeyValue] = []
        for index, entry in enumerate(entries):
            key = entry.key.model_copy(update={"decor": entry.decor})
            value = self.format_value(entry.value, last=index + 1 == len(entries))
            formatted.append(KeyValue(key=key, value=value))

        prefix, suffix = decor.surround(table.decor.prefix, table.decor.suffix, last)
        return InlineTable(entries=formatted, decor=Decor(prefix=prefix, suffix=suffix))

    def format_value(self, value: Value, last: bool) -> Value:
        """Format a value; ``last`` tells whether it closes its container."""
        if isinstance(value, Array):
            return self.format_array(value, last)
        if isinstance(value, InlineTable):
            return self.format_inline_table(value, last)
        if isinstance(value, Scalar):
            return self.format_scalar(value, last)
        raise TypeError(f"Unknown value type: {type(value).__name__}")

    def format_scalar(self, value: Scalar, last: bool) -> Scalar:
        prefix, suffix = decor.surround(value.decor.prefix, value.decor.suffix, last)
        return value.model_copy(update={"raw": normalize_quotes(value.raw), "decor": Decor(prefix=prefix, suffix=suffix)})

    def format_array(self, array: Array, last: bool) -> Array:
        """Format an array, keeping it inline or multiline as it was written.

        With ``sort_arrays`` string values are sorted and moved before every
        other value, which keep their original order. A comment written after
        a value, before or after its comma, stays with that value.
        """
        values = list(array.values)
        multiline = _is_multiline(array)
        head, trailing = "", array.trailing
        if multiline:
            head, values, trailing = _claim_line_comments(values, trailing)
        if self.sort_arrays:
            values.sort(key=_array_sort_key)

        if multiline:
            formatted = []
            # The comment of the previous value is written after its comma.
            comment = head
            for value in values:
                prefix = decor.array_element_prefix(decor.join_comment(comment, value.decor.prefix))
                comment = decor.trim(value.decor.suffix)
                formatted_value = self.format_value(value, last=False)
                formatted.append(formatted_value.model_copy(update={"decor": Decor(prefix=prefix)}))
            trailing = decor.array_trailing(decor.join_comment(comment, trailing))
            trailing_comma = True
        else:
            formatted = [self.format_value(value, last=index + 1 == len(values)) for index, value in enumerate(values)]
            trailing = ""
            trailing_comma = False

        prefix, suffix = decor.surround(array.decor.prefix, array.decor.suffix, last)
        return Array(
            values=formatted,
            trailing=trailing,
            trailing_comma=trailing_comma,
            decor=Decor(prefix=prefix, suffix=suffix),
        )

    def _flush_section(self, table: Table, section: list[Entry[Item]], section_prefix: str | None) -> None:
        section.sort(key=lambda entry: self.keys.sort_key(entry.key.name))
        if section_prefix is not None and section:
            # Key/value pairs render before child tables, so the first one opens the section.
            first = next((entry for entry in section if not _is_table(entry.value)), section[0])
            first.decor = Decor(
                prefix=decor.attach_section_prefix(section_prefix, first.decor.prefix),
                suffix=first.decor.suffix,
            )
        for entry in section:
            key = entry.key.model_copy(update={"decor": entry.decor})
            table.entries.append(TableEntry(key=key, item=entry.value))


def normalize_quotes(raw: str) -> str:
    """Rewrite a simple ``'literal'`` string as a ``"basic"`` one.

    Multi-line literals and literals holding a backslash or a double quote are
    left alone.
    """
    if raw.startswith("'") and not raw.startswith("''") and not any(char in raw for char in '\\"'):
        return f'"{raw[1:-1]}"'
    return raw


def _is_multiline(array: Array) -> bool:
    if "\n" in array.trailing or "#" in array.trailing:
        return True
    return any("\n" in value.decor.prefix or "\n" in value.decor.suffix for value in array.values)


def _claim_line_comments(values: list[Value], trailing: str) -> tuple[str, list[Value], str]:
    """Move each comment found after a comma onto the value before that comma.

    The comment on the line of the opening bracket is returned separately so
    it stays at the head of the array.
    """
    values = list(values)
    head = ""
    for index, value in enumerate(values):
        comment, prefix = decor.split_line_comment(value.decor.prefix)
        if not comment:
            continue
        if index == 0:
            head = comment
        else:
            values[index - 1] = _with_comment(values[index - 1], comment)
        values[index] = value.model_copy(update={"decor": Decor(prefix=prefix, suffix=value.decor.suffix)})
    if values:
        comment, rest = decor.split_line_comment(trailing)
        if comment:
            values[-1] = _with_comment(values[-1], comment)
            trailing = rest
    return head, values, trailing


def _with_comment(value: Value, comment: str) -> Value:
    suffix = decor.join_comment(decor.trim(value.decor.suffix), comment)
    return value.model_copy(update={"decor": Decor(prefix=value.decor.prefix, suffix=suffix)})


def _array_sort_key(value: Value) -> tuple[int, str]:
    if isinstance(value, Scalar) and value.is_string:
        return (0, value.text or "")
    return (1, "")


def _is_table(item: Item) -> bool:
    return isinstance(item, (Table, ArrayOfTables))


__all__ = ["Entry", "TomlFormatter", "normalize_quotes"]
