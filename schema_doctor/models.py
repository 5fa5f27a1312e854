"""
Snapshot of ORM model to table mappings.

Detectors never walk a global model registry. The caller builds a snapshot
once, at the edge of the program, and passes it in.
"""
from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple

from sqlalchemy import Table
from sqlalchemy.orm import Mapper, RelationshipDirection, registry as orm_registry

from schema_doctor.config import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Relationship:
    name: str
    target_table: str
    columns: Tuple[str, ...]
    referred_columns: Tuple[str, ...]


@dataclass(frozen=True)
class ModelMapping:
    name: str
    table_name: str
    columns: Tuple[str, ...] = ()
    relationships: Tuple[Relationship, ...] = ()


ModelSnapshot = Tuple[ModelMapping, ...]


def _mapping_from_mapper(mapper: Mapper) -> ModelMapping:
    table = mapper.local_table
    relationships: List[Relationship] = []
    for prop in mapper.relationships:
        # Only many-to-one sides own the foreign key columns.
        if prop.direction is not RelationshipDirection.MANYTOONE:
            continue
        target = prop.mapper.local_table
        if not isinstance(target, Table):
            continue
        pairs = [
            (local.name, remote.name)
            for local, remote in prop.local_remote_pairs
            if local.table is table
        ]
        if not pairs:
            continue
        relationships.append(
            Relationship(
                name=prop.key,
                target_table=target.name,
                columns=tuple(local for local, _ in pairs),
                referred_columns=tuple(remote for _, remote in pairs),
            )
        )
    return ModelMapping(
        name=mapper.class_.__name__,
        table_name=table.name,
        columns=tuple(column.name for column in table.columns),
        relationships=tuple(sorted(relationships, key=lambda r: r.name)),
    )


def snapshot_from_registry(source: Any) -> ModelSnapshot:
    """Build a snapshot from a SQLAlchemy ``registry`` or declarative base."""
    reg = source if isinstance(source, orm_registry) else getattr(source, "registry", None)
    if not isinstance(reg, orm_registry):
        raise ConfigurationError(f"{source!r} is neither a SQLAlchemy registry nor a declarative base")
    mappings = []
    for mapper in reg.mappers:
        # Single-table inheritance children share the parent's table.
        if not isinstance(mapper.local_table, Table) or (mapper.inherits is not None and mapper.single):
            continue
        mappings.append(_mapping_from_mapper(mapper))
    logger.debug("Captured %d model mappings", len(mappings))
    return tuple(sorted(mappings, key=lambda m: m.name))


def load_snapshot(target: str) -> ModelSnapshot:
    """Import ``module:attribute`` and snapshot the registry it names."""
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise ConfigurationError(f"Expected models as module:attribute, got {target!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Could not import {module_name}: {exc}") from exc
    try:
        source = getattr(module, attribute)
    except AttributeError:
        raise ConfigurationError(f"{module_name} has no attribute {attribute}") from None
    return snapshot_from_registry(source)


def tables_of(models: Iterable[ModelMapping]) -> List[str]:
    return sorted({model.table_name for model in models})
