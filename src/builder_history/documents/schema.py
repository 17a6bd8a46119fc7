"""Database schema records and their history adapter."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

from builder_history.history import SCHEMA_OPTIONS, HistoryOptions

from .base import DocumentHistory

COLUMN_TYPES: tuple[str, ...] = (
    "String",
    "Int",
    "Float",
    "Boolean",
    "DateTime",
    "Json",
)


@dataclass(frozen=True, slots=True)
class SchemaColumn:
    id: str
    name: str
    type: str = "String"
    required: bool = False
    unique: bool = False
    default_value: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("column id cannot be empty")
        if self.type not in COLUMN_TYPES:
            raise ValueError(
                f"unknown column type '{self.type}'; expected one of {COLUMN_TYPES}"
            )


@dataclass(frozen=True, slots=True)
class SchemaTable:
    id: str
    name: str
    columns: Tuple[SchemaColumn, ...] = ()

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("table id cannot be empty")
        object.__setattr__(self, "columns", tuple(self.columns))

    def find_column(self, column_id: str) -> Optional[SchemaColumn]:
        return next((c for c in self.columns if c.id == column_id), None)


TableList = Tuple[SchemaTable, ...]


class SchemaHistoryAdapter(DocumentHistory[SchemaTable]):
    """Table and column mutators for the schema designer."""

    default_options = SCHEMA_OPTIONS

    def __init__(
        self,
        initial: Iterable[SchemaTable] = (),
        *,
        options: Optional[HistoryOptions] = None,
        **store_kwargs: object,
    ) -> None:
        store_kwargs.setdefault("name", "schema")
        super().__init__(initial, options=options, **store_kwargs)

    @property
    def tables(self) -> TableList:
        return self.history.current_state

    def find_table(self, table_id: str) -> Optional[SchemaTable]:
        return next((table for table in self.working if table.id == table_id), None)

    def update_tables(self, tables: Iterable[SchemaTable], action: str) -> TableList:
        return self._commit(tables, action)

    def add_table(self, table: SchemaTable) -> TableList:
        return self._commit(
            (*self.working, table), f"Added table {table.name}", immediate=True
        )

    def remove_table(self, table_id: str) -> TableList:
        target = self.find_table(table_id)
        remaining = [table for table in self.working if table.id != table_id]
        label = f"Removed table {target.name if target else 'unknown'}"
        return self._commit(remaining, label, immediate=True)

    def update_table(self, table_id: str, **changes: object) -> TableList:
        target = self.find_table(table_id)
        updated = [
            replace(table, **changes) if table.id == table_id else table  # type: ignore[arg-type]
            for table in self.working
        ]
        label = f"Updated table {target.name if target else 'unknown'}"
        return self._commit(updated, label)

    def add_column(self, table_id: str, column: SchemaColumn) -> TableList:
        target = self.find_table(table_id)
        updated = [
            replace(table, columns=(*table.columns, column))
            if table.id == table_id
            else table
            for table in self.working
        ]
        label = f"Added column {column.name} to {target.name if target else 'unknown'}"
        return self._commit(updated, label, immediate=True)

    def remove_column(self, table_id: str, column_id: str) -> TableList:
        target = self.find_table(table_id)
        column = target.find_column(column_id) if target else None
        updated = [
            replace(
                table,
                columns=tuple(c for c in table.columns if c.id != column_id),
            )
            if table.id == table_id
            else table
            for table in self.working
        ]
        label = (
            f"Removed column {column.name if column else 'unknown'} "
            f"from {target.name if target else 'unknown'}"
        )
        return self._commit(updated, label, immediate=True)


__all__ = [
    "COLUMN_TYPES",
    "SchemaColumn",
    "SchemaHistoryAdapter",
    "SchemaTable",
]
