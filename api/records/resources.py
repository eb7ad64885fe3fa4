"""
Declarative description of a database-backed resource.

A `Resource` names its table, its scalar fields and its asset slots; the
generic service/repository/router in this package do the rest.
Table and column names come from this module only, never from requests,
so the repository can interpolate them into SQL.
"""

from __future__ import annotations

from dataclasses import dataclass, field as dc_field
from typing import Any, Callable

FIELD_KINDS = {"text", "int", "number", "bool", "list"}
SLOT_KINDS = {"image", "pdf"}
UPDATE_MODES = {"replace", "merge"}


@dataclass(frozen=True)
class Field:
    name: str
    kind: str = "text"
    required: bool = False
    default: Any = None
    # camelCase name the website forms post
    alias: str | None = None
    choices: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unknown field kind {self.kind!r} for {self.name!r}")

    @property
    def is_json(self) -> bool:
        return self.kind == "list"


@dataclass(frozen=True)
class AssetSlot:
    name: str
    column: str | None = None
    kind: str = "image"
    required: bool = False
    multiple: bool = False
    max_count: int = 1
    subdir: str | None = None
    original_name_column: str | None = None
    size_column: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in SLOT_KINDS:
            raise ValueError(f"Unknown slot kind {self.kind!r} for {self.name!r}")
        if self.column is None:
            object.__setattr__(self, "column", self.name)

    @property
    def keep_param(self) -> str:
        """Form/JSON key listing which stored files of a multi slot to keep."""
        return f"existing_{self.name}"


@dataclass(frozen=True)
class Resource:
    name: str
    table: str
    label: str
    fields: tuple[Field, ...] = ()
    slots: tuple[AssetSlot, ...] = ()
    subdir: str | None = None
    update_mode: str = "replace"
    order_by: str = "created_at DESC, id DESC"
    filters: tuple[str, ...] = ()
    search: tuple[str, ...] = ()
    slug_column: str | None = None
    slug_source: str | None = None
    paginated: bool = False
    singleton: bool = False
    decorate: Callable[[dict[str, Any]], dict[str, Any]] | None = dc_field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.update_mode not in UPDATE_MODES:
            raise ValueError(f"Unknown update mode {self.update_mode!r} for {self.name!r}")
        if self.slots and not self.subdir:
            raise ValueError(f"Resource {self.name!r} has asset slots but no subdir")

    def slot_subdir(self, slot: AssetSlot) -> str:
        return slot.subdir or self.subdir or ""

    def field(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def json_columns(self) -> set[str]:
        columns = {f.name for f in self.fields if f.is_json}
        columns.update(s.column for s in self.slots if s.multiple)
        return columns

    @property
    def columns(self) -> list[str]:
        """Every writable column, in insert order."""
        columns = [f.name for f in self.fields]
        for slot in self.slots:
            columns.append(slot.column)
            if slot.original_name_column:
                columns.append(slot.original_name_column)
            if slot.size_column:
                columns.append(slot.size_column)
        return columns

    @property
    def multi_slots(self) -> tuple[AssetSlot, ...]:
        return tuple(s for s in self.slots if s.multiple)

    @property
    def subdirs(self) -> set[str]:
        return {self.slot_subdir(s) for s in self.slots}
