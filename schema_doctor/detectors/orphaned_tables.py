from __future__ import annotations

from typing import Any

from schema_doctor.detectors.base import IGNORE_TABLES, Detector
from schema_doctor.models import tables_of


class OrphanedTables(Detector):
    """Tables that no model maps to."""

    description = "detect tables not backed by any model"
    settings = {
        "ignore_tables": IGNORE_TABLES,
        "ignore_internal_tables": {
            "description": "bookkeeping tables owned by migration tools",
            "default": ["alembic_version"],
        },
    }

    def detect(self) -> None:
        # Without a model snapshot every table would look orphaned.
        if not self.models:
            return
        mapped = set(tables_of(self.models))
        internal = set(self.setting("ignore_internal_tables"))
        for table in self.tables():
            if table in mapped or table in internal or self.ignored_table(table):
                continue
            self.problem(table=table)

    def message(self, table: str, **_: Any) -> str:
        return f"{table} is not backed by any model"
