"""Indexes that another index, or the primary key, already covers."""
from __future__ import annotations

from typing import Any, List, Sequence

from schema_doctor.config import is_ignored
from schema_doctor.detectors.base import IGNORE_TABLES, Detector
from schema_doctor.introspection import Index


class ExtraneousIndexes(Detector):
    description = "identify indexes that can be dropped without degrading performance"
    settings = {
        "ignore_tables": IGNORE_TABLES,
        "ignore_indexes": {
            "description": "indexes whose problems should not be reported",
            "default": [],
        },
    }

    def detect(self) -> None:
        for table in self.tables():
            if self.ignored_table(table):
                continue
            indexes = [
                index for index in self.indexes(table)
                if not is_ignored(index.name, self.setting("ignore_indexes"))
            ]
            self._subindexes_of_multi_column_indexes(indexes)
            self._indexes_duplicating_primary_key(table, indexes)

    def _subindexes_of_multi_column_indexes(self, indexes: Sequence[Index]) -> None:
        for index in indexes:
            # Partial indexes cover a different row set than their neighbours.
            if index.partial:
                continue
            replacements = [
                other.name for other in indexes
                if other is not index and not other.partial and self._covers(other, index)
            ]
            if replacements:
                self.problem(
                    extraneous_index=index.name,
                    replacement_indexes=replacements,
                    reason="multi_column",
                )

    def _indexes_duplicating_primary_key(self, table: str, indexes: Sequence[Index]) -> None:
        primary_key = [column.name for column in self.introspector.primary_key_columns(table)]
        if not primary_key:
            return
        for index in indexes:
            if not index.partial and list(index.columns) == primary_key:
                self.problem(extraneous_index=index.name, replacement_indexes=None, reason="primary_key")

    @staticmethod
    def _covers(other: Index, index: Index) -> bool:
        """True when ``other`` makes ``index`` redundant."""
        if len(other.columns) < len(index.columns):
            return False
        if other.columns[: len(index.columns)] != index.columns:
            return False
        if other.columns == index.columns:
            if other.unique != index.unique:
                return other.unique
            # Identical definitions: report only the later one so the pair is flagged once.
            return other.name < index.name
        # A longer index cannot enforce uniqueness on its prefix.
        return not index.unique

    def message(self, extraneous_index: str, replacement_indexes: List[str], reason: str, **_: Any) -> str:
        if reason == "primary_key":
            return f"remove {extraneous_index} - coincides with the primary key on the table"
        return f"remove {extraneous_index} - can be handled by {', '.join(replacement_indexes)}"
