"""TOML document container."""

from __future__ import annotations

from dataclasses import dataclass, field

from .nodes import Item, Key, Table, TableEntry


@dataclass
class TomlDocument:
    root: Table = field(default_factory=lambda: Table(implicit=True))
    # Comments and blank lines after the last entry of the file.
    trailing: str = ""

    def add_entry(self, key: Key, item: Item) -> Item:
        return self.root.add_entry(key, item)

    def entries(self) -> list[TableEntry]:
        return self.root.entries
