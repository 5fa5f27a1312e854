from __future__ import annotations

from typing import Any

from schema_doctor.detectors.base import IGNORE_TABLES, Detector


class TableWithoutPrimaryKey(Detector):
    """Flags tables that have no primary key at all."""

    description = "detect tables without primary keys"
    settings = {
        "ignore_tables": IGNORE_TABLES,
    }

    def detect(self) -> None:
        for table in self.tables():
            if self.ignored_table(table):
                continue
            if not self.introspector.primary_key_columns(table):
                self.problem(table=table)

    def message(self, table: str, **_: Any) -> str:
        return f"add a primary key to {table}"
