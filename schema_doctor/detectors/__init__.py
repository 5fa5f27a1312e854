"""Registry of built-in detectors.

Detectors are listed explicitly; nothing is discovered by walking subclasses.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Type

from schema_doctor.config import ConfigurationError, check_definitions
from schema_doctor.detectors.base import Detector
from schema_doctor.detectors.extraneous_indexes import ExtraneousIndexes
from schema_doctor.detectors.mismatched_foreign_key_type import MismatchedForeignKeyType
from schema_doctor.detectors.missing_foreign_keys import MissingForeignKeys
from schema_doctor.detectors.orphaned_tables import OrphanedTables
from schema_doctor.detectors.table_without_primary_key import TableWithoutPrimaryKey
from schema_doctor.detectors.table_without_timestamps import TableWithoutTimestamps
from schema_doctor.detectors.undefined_table_references import UndefinedTableReferences
from schema_doctor.detectors.unindexed_foreign_keys import UnindexedForeignKeys

BUILTIN_DETECTORS = (
    ExtraneousIndexes,
    MismatchedForeignKeyType,
    MissingForeignKeys,
    OrphanedTables,
    TableWithoutPrimaryKey,
    TableWithoutTimestamps,
    UndefinedTableReferences,
    UnindexedForeignKeys,
)

check_definitions(BUILTIN_DETECTORS)

DETECTORS: Dict[str, Type[Detector]] = {detector.name: detector for detector in BUILTIN_DETECTORS}


def get_detector(name: str) -> Type[Detector]:
    try:
        return DETECTORS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown detector {name}. Available detectors: {', '.join(sorted(DETECTORS))}"
        ) from None


def select_detectors(names: Iterable[str] = ()) -> List[Type[Detector]]:
    """Resolve detector names; no names selects every registered detector."""
    names = list(names)
    if not names:
        return [DETECTORS[name] for name in sorted(DETECTORS)]
    return [get_detector(name) for name in names]


__all__ = [
    "BUILTIN_DETECTORS",
    "DETECTORS",
    "Detector",
    "ExtraneousIndexes",
    "MismatchedForeignKeyType",
    "MissingForeignKeys",
    "OrphanedTables",
    "TableWithoutPrimaryKey",
    "TableWithoutTimestamps",
    "UndefinedTableReferences",
    "UnindexedForeignKeys",
    "get_detector",
    "select_detectors",
]
