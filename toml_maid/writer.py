"""Serializer turning a decorated tree back into TOML text."""

from __future__ import annotations

from dataclasses import dataclass

from .document import TomlDocument
from .nodes import Array, ArrayOfTables, InlineTable, Item, Scalar, Table, Value


@dataclass
class TomlWriter:
    """Renders nodes exactly as their decoration describes.

    Key/value pairs of a table are written before its child tables, child
    tables get a ``[dotted.path]`` header unless they are implicit.
    """

    newline: str = "\n"

    def render(self, document: TomlDocument) -> str:
        lines: list[str] = []
        self._render_body(document.root, [], lines)
        return "".join(lines) + document.trailing

    def render_value(self, value: Value) -> str:
        return f"{value.decor.prefix}{self._render_bare(value)}{value.decor.suffix}"

    def _render_table(self, table: Table, path: list[str], key_prefix: str, lines: list[str]) -> None:
        if not table.implicit:
            lines.append(f"{key_prefix}{table.decor.prefix}[{'.'.join(path)}]{table.decor.suffix}{self.newline}")
        elif key_prefix:
            lines.append(key_prefix)
        self._render_body(table, path, lines)

    def _render_body(self, table: Table, path: list[str], lines: list[str]) -> None:
        for entry in table.entries:
            if isinstance(entry.item, (Table, ArrayOfTables)):
                continue
            key = entry.key
            lines.append(
                f"{key.decor.prefix}{key.raw}{key.decor.suffix}={self.render_value(entry.item)}{self.newline}"
            )
        for entry in table.entries:
            if isinstance(entry.item, Table):
                self._render_table(entry.item, [*path, entry.key.raw], entry.key.decor.prefix, lines)
            elif isinstance(entry.item, ArrayOfTables):
                lines.append(entry.key.decor.prefix)
                lines.extend(self._render_blocks(entry.item))

    def _render_blocks(self, array: ArrayOfTables) -> list[str]:
        return [block if block.endswith("\n") else f"{block}{self.newline}" for block in array.blocks]

    def _render_bare(self, value: Item) -> str:
        if isinstance(value, Scalar):
            return value.raw
        if isinstance(value, Array):
            body = ",".join(self.render_value(item) for item in value.values)
            comma = "," if value.trailing_comma and value.values else ""
            return f"[{body}{comma}{value.trailing}]"
        if isinstance(value, InlineTable):
            body = ",".join(
                f"{entry.key.decor.prefix}{entry.key.raw}{entry.key.decor.suffix}={self.render_value(entry.value)}"
                for entry in value.entries
            )
            return f"{{{body}}}"
        raise TypeError(f"Cannot render {type(value).__name__} inline")


def render_document(document: TomlDocument) -> str:
    return TomlWriter().render(document)


__all__ = ["TomlWriter", "render_document"]
