from __future__ import annotations

from typing import Any

from schema_doctor.detectors.base import IGNORE_TABLES, Detector


class TableWithoutTimestamps(Detector):
    description = "detect tables without created_at/updated_at columns"
    settings = {
        "ignore_tables": IGNORE_TABLES,
        "created_columns": {
            "description": "column names accepted as the creation timestamp",
            "default": ["created_at", "created_on"],
        },
        "updated_columns": {
            "description": "column names accepted as the update timestamp",
            "default": ["updated_at", "updated_on"],
        },
    }

    def detect(self) -> None:
        created = set(self.setting("created_columns"))
        updated = set(self.setting("updated_columns"))
        for table in self.tables():
            if self.ignored_table(table):
                continue
            names = {column.name for column in self.columns(table)}
            if not (names & created and names & updated):
                self.problem(table=table)

    def message(self, table: str, **_: Any) -> str:
        return f"add a created_at/updated_at timestamp column to {table}"
