"""
Read-only schema introspection over a SQLAlchemy engine or connection.

This is the only channel through which detectors observe the database. Every
query goes through a fresh ``sqlalchemy.inspect`` so it reflects the current
state of the connection instead of an inspector cache.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.engine.reflection import Inspector
from sqlalchemy.exc import NoSuchTableError
from sqlalchemy.types import NullType, TypeEngine

from schema_doctor.config import CONFIG, ConfigurationError

logger = logging.getLogger(__name__)

# Dialects whose SQLAlchemy inspector can enumerate views reliably.
VIEW_INTROSPECTION_DIALECTS = frozenset({"postgresql", "mysql", "mariadb", "sqlite", "mssql", "oracle"})


class _Unsupported:
    """Sentinel for capabilities the backend cannot provide."""

    def __repr__(self) -> str:
        return "UNSUPPORTED"

    def __bool__(self) -> bool:
        return False


UNSUPPORTED = _Unsupported()


# --------------------------------------------------------------------------------------
# Data containers
# --------------------------------------------------------------------------------------
@dataclass(frozen=True)
class Column:
    name: str
    type: str
    nullable: bool
    default: Optional[str] = None


@dataclass(frozen=True)
class Index:
    name: str
    table: str
    columns: Tuple[str, ...]
    unique: bool = False
    partial: bool = False


@dataclass(frozen=True)
class ForeignKey:
    name: Optional[str]
    table: str
    columns: Tuple[str, ...]
    referred_table: str
    referred_columns: Tuple[str, ...]


# --------------------------------------------------------------------------------------
# Introspector
# --------------------------------------------------------------------------------------
class SchemaIntrospector:
    """Uniform query surface over the live database connection."""

    def __init__(self, bind: Union[Engine, Connection], schema: Optional[str] = None) -> None:
        self.bind = bind
        self.schema = schema
        # Resolved once so detectors never branch on adapter names.
        self.supports_view_introspection = self.dialect_name in VIEW_INTROSPECTION_DIALECTS

    @property
    def dialect_name(self) -> str:
        return self.bind.dialect.name

    def _inspector(self) -> Inspector:
        return inspect(self.bind)

    def list_tables(self) -> List[str]:
        return sorted(self._inspector().get_table_names(schema=self.schema))

    def list_views(self) -> Union[List[str], _Unsupported]:
        """Return view names, or UNSUPPORTED when the backend cannot list them.

        Callers must treat UNSUPPORTED differently from an empty list.
        """
        if not self.supports_view_introspection:
            logger.debug("View introspection is not supported on %s", self.dialect_name)
            return UNSUPPORTED
        inspector = self._inspector()
        names = set(inspector.get_view_names(schema=self.schema))
        if self.dialect_name == "postgresql":
            names.update(inspector.get_materialized_view_names(schema=self.schema))
        return sorted(names)

    def table_exists(self, table_name: str) -> bool:
        return table_name in self.list_tables()

    def list_columns(self, table_name: str) -> List[Column]:
        try:
            rows = self._inspector().get_columns(table_name, schema=self.schema)
        except NoSuchTableError:
            return []
        return [self._column(row) for row in rows]

    def list_indexes(self, table_name: str) -> List[Index]:
        try:
            rows = self._inspector().get_indexes(table_name, schema=self.schema)
        except NoSuchTableError:
            return []
        return [self._index(table_name, row) for row in rows]

    def list_foreign_keys(self, table_name: str) -> List[ForeignKey]:
        try:
            rows = self._inspector().get_foreign_keys(table_name, schema=self.schema)
        except NoSuchTableError:
            return []
        return [
            ForeignKey(
                name=row.get("name"),
                table=table_name,
                columns=tuple(row["constrained_columns"]),
                referred_table=row["referred_table"],
                referred_columns=tuple(row["referred_columns"]),
            )
            for row in rows
        ]

    def primary_key_columns(self, table_name: str) -> List[Column]:
        inspector = self._inspector()
        try:
            constraint = inspector.get_pk_constraint(table_name, schema=self.schema)
            rows = inspector.get_columns(table_name, schema=self.schema)
        except NoSuchTableError:
            return []
        by_name = {row["name"]: row for row in rows}
        names = constraint.get("constrained_columns") or []
        return [self._column(by_name[name]) for name in names if name in by_name]

    def primary_key_column(self, table_name: str) -> Optional[Column]:
        """Return the single primary key column, or None.

        Tables without a primary key and tables with a composite one both
        return None.
        """
        columns = self.primary_key_columns(table_name)
        if len(columns) != 1:
            return None
        return columns[0]

    def find_column(self, table_name: str, column_name: str) -> Optional[Column]:
        for column in self.list_columns(table_name):
            if column.name == column_name:
                return column
        return None

    def _column(self, row: Dict[str, Any]) -> Column:
        default = row.get("default")
        return Column(
            name=row["name"],
            type=self._type_name(row["type"]),
            nullable=bool(row.get("nullable", True)),
            default=None if default is None else str(default),
        )

    def _type_name(self, type_: TypeEngine) -> str:
        # Columns declared without a type (allowed by SQLite) reflect as NullType.
        if isinstance(type_, NullType):
            return ""
        return type_.compile(dialect=self.bind.dialect)

    @staticmethod
    def _index(table_name: str, row: Dict[str, Any]) -> Index:
        expressions = row.get("expressions") or []
        columns = []
        for position, name in enumerate(row["column_names"]):
            # Expression indexes report None in place of a column name.
            if name is None and position < len(expressions):
                name = expressions[position]
            columns.append(name)
        dialect_options = row.get("dialect_options") or {}
        partial = any(key.endswith("_where") and value is not None for key, value in dialect_options.items())
        return Index(
            name=row["name"],
            table=table_name,
            columns=tuple(columns),
            unique=bool(row.get("unique")),
            partial=partial,
        )


def connect(url: Optional[str] = None, schema: Optional[str] = None) -> SchemaIntrospector:
    """Create an engine for ``url`` (or CONFIG) and wrap it in an introspector."""
    url = url or CONFIG["DATABASE_URL"]
    if not url:
        raise ConfigurationError("No database URL configured. Set DATABASE_URL or pass --database-url.")
    engine = create_engine(url, future=True)
    logger.info("Connecting to %s", engine.url.render_as_string(hide_password=True))
    return SchemaIntrospector(engine, schema=schema if schema is not None else CONFIG["SCHEMA"])
