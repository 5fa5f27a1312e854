from __future__ import annotations

from typing import Any, List, Sequence, Tuple

from schema_doctor.config import is_ignored
from schema_doctor.detectors.base import IGNORE_TABLES, Detector, qualified_columns


class UnindexedForeignKeys(Detector):
    """Foreign keys whose columns do not lead any index.

    Column order inside a composite key does not matter: an index covers the
    key when its first ``len(key)`` columns are exactly the key's columns.
    """

    description = "detect foreign keys without an index"
    settings = {
        "ignore_tables": IGNORE_TABLES,
        "ignore_columns": {
            "description": "columns, written as table.column, whose problems should not be reported",
            "default": [],
        },
    }

    def detect(self) -> None:
        for table in self.tables():
            if self.ignored_table(table):
                continue
            prefixes: List[Tuple[str, ...]] = [index.columns for index in self.indexes(table)]
            primary_key = tuple(column.name for column in self.introspector.primary_key_columns(table))
            if primary_key:
                prefixes.append(primary_key)
            for foreign_key in self.foreign_keys(table):
                if any(self._leads(prefix, foreign_key.columns) for prefix in prefixes):
                    continue
                if any(
                    is_ignored(f"{table}.{column}", self.setting("ignore_columns"))
                    for column in foreign_key.columns
                ):
                    continue
                self.problem(table=table, columns=foreign_key.columns)

    @staticmethod
    def _leads(index_columns: Sequence[str], key_columns: Sequence[str]) -> bool:
        return set(index_columns[: len(key_columns)]) == set(key_columns)

    def message(self, table: str, columns: Sequence[str], **_: Any) -> str:
        return (
            f"add an index on {qualified_columns(table, columns)} - foreign keys are often used"
            " in database lookups and should be indexed for performance reasons"
        )
