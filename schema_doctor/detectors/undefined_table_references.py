from __future__ import annotations

from typing import Any

from schema_doctor.detectors.base import IGNORE_TABLES, Detector
from schema_doctor.introspection import UNSUPPORTED


class UndefinedTableReferences(Detector):
    """Models mapped to a table or view the database does not have."""

    description = "detect models referencing undefined tables or views"
    settings = {
        "ignore_tables": IGNORE_TABLES,
    }
    needs_views = True

    def detect(self) -> None:
        if self.views is UNSUPPORTED:
            self.warning(
                f"{self.name} cannot list views on {self.introspector.dialect_name};"
                " skipping the check."
            )
            return
        known = set(self.tables()) | set(self.views)
        for model in self.models:
            if self.ignored_table(model.table_name):
                continue
            if model.table_name not in known:
                self.problem(model=model.name, table=model.table_name)

    def message(self, model: str, table: str, **_: Any) -> str:
        return f"{model} references a non-existent table or view named {table}"
