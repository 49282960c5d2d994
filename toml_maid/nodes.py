"""Node definitions for the decorated TOML tree.

Every node keeps the raw text around it in a ``Decor`` so the tree can be
rendered back without losing comments or blank lines.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

ScalarType = Literal["string", "integer", "float", "boolean", "datetime"]


class Decor(BaseModel):
    """Whitespace and comment text attached before and after a key or value."""

    prefix: str = ""
    suffix: str = ""


class Key(BaseModel):
    raw: str
    name: str
    decor: Decor = Field(default_factory=Decor)


class Scalar(BaseModel):
    kind: Literal["scalar"] = "scalar"
    raw: str
    scalar_type: ScalarType
    # Decoded content, only set for strings.
    text: str | None = None
    decor: Decor = Field(default_factory=Decor)

    @property
    def is_string(self) -> bool:
        return self.scalar_type == "string"


class Array(BaseModel):
    kind: Literal["array"] = "array"
    values: list[Value] = Field(default_factory=list)
    # Text between the last value (or its comma) and the closing bracket.
    trailing: str = ""
    trailing_comma: bool = False
    decor: Decor = Field(default_factory=Decor)


class KeyValue(BaseModel):
    key: Key
    value: Value


class InlineTable(BaseModel):
    kind: Literal["inline_table"] = "inline_table"
    entries: list[KeyValue] = Field(default_factory=list)
    decor: Decor = Field(default_factory=Decor)


class TableEntry(BaseModel):
    key: Key
    item: Item


class Table(BaseModel):
    kind: Literal["table"] = "table"
    entries: list[TableEntry] = Field(default_factory=list)
    # Header decoration: lines before ``[header]`` and the rest of the header line.
    decor: Decor = Field(default_factory=Decor)
    implicit: bool = False

    def add_entry(self, key: Key, item: Item) -> Item:
        entry = TableEntry(key=key, item=item)
        self.entries.append(entry)
        return entry.item

    def get(self, name: str) -> Item | None:
        for entry in self.entries:
            if entry.key.name == name:
                return entry.item
        return None


class ArrayOfTables(BaseModel):
    """``[[header]]`` elements, kept verbatim."""

    kind: Literal["array_of_tables"] = "array_of_tables"
    blocks: list[str] = Field(default_factory=list)


Value = Annotated[Union[Scalar, Array, InlineTable], Field(discriminator="kind")]
Item = Annotated[Union[Scalar, Array, InlineTable, Table, ArrayOfTables], Field(discriminator="kind")]

Array.model_rebuild()
KeyValue.model_rebuild()
InlineTable.model_rebuild()
TableEntry.model_rebuild()
Table.model_rebuild()


__all__ = [
    "ScalarType",
    "Decor",
    "Key",
    "Scalar",
    "Array",
    "KeyValue",
    "InlineTable",
    "TableEntry",
    "Table",
    "ArrayOfTables",
    "Value",
    "Item",
]
