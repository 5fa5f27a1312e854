from __future__ import annotations

from typing import Any

from schema_doctor.detectors.base import IGNORE_TABLES, Detector


class MismatchedForeignKeyType(Detector):
    description = "detect foreign key columns whose type differs from the referenced column"
    settings = {
        "ignore_tables": IGNORE_TABLES,
    }

    def detect(self) -> None:
        for table in self.tables():
            if self.ignored_table(table):
                continue
            for foreign_key in self.foreign_keys(table):
                for column_name, referred_name in zip(foreign_key.columns, foreign_key.referred_columns):
                    column = self.column(table, column_name)
                    referred = self.column(foreign_key.referred_table, referred_name)
                    if column is None or referred is None:
                        continue
                    if column.type != referred.type:
                        self.problem(table=table, column=column_name)

    def message(self, table: str, column: str, **_: Any) -> str:
        return (
            f"{table}.{column} references a column of a different type"
            " - foreign keys should be of the same type as the referenced column"
        )
