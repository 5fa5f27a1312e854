from __future__ import annotations

from typing import Any, Sequence

from schema_doctor.config import is_ignored
from schema_doctor.detectors.base import IGNORE_TABLES, Detector, qualified_columns


class MissingForeignKeys(Detector):
    """Model associations whose columns carry no foreign key constraint in the database.

    Composite associations match a constraint on the same set of columns,
    in any order.
    """

    description = "detect association columns without a foreign key constraint"
    settings = {
        "ignore_tables": IGNORE_TABLES,
        "ignore_columns": {
            "description": "columns, written as table.column, whose problems should not be reported",
            "default": [],
        },
    }

    def detect(self) -> None:
        for model in self.models:
            table = model.table_name
            if self.ignored_table(table) or not self.table_exists(table):
                continue
            constrained = {frozenset(fk.columns) for fk in self.foreign_keys(table)}
            existing = {column.name for column in self.columns(table)}
            for relationship in model.relationships:
                if frozenset(relationship.columns) in constrained:
                    continue
                if not set(relationship.columns) <= existing:
                    continue
                if any(
                    is_ignored(f"{table}.{column}", self.setting("ignore_columns"))
                    for column in relationship.columns
                ):
                    continue
                self.problem(table=table, columns=relationship.columns)

    def message(self, table: str, columns: Sequence[str], **_: Any) -> str:
        return (
            f"create a foreign key on {qualified_columns(table, columns)}"
            " - looks like an association without a foreign key constraint"
        )
