"""
Base class for all schema_doctor detectors.

A detector declares its settings (each with a default) on the class and
implements ``detect`` and ``message``. ``detect`` reports findings through
``problem``; the base class resolves configuration, renders the findings in
the order they were reported and turns the run into a success flag.
"""
from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from schema_doctor.config import ConfigurationError, effective_config, is_ignored, validate_settings
from schema_doctor.introspection import UNSUPPORTED, Column, ForeignKey, Index, SchemaIntrospector
from schema_doctor.models import ModelMapping
from schema_doctor.printers import IOPrinter
from schema_doctor.reporter import ProblemReporter

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

IGNORE_TABLES: Dict[str, Any] = {
    "description": "tables whose problems should not be reported",
    "default": [],
    "global": True,
}


def underscore(class_name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", class_name).lower()


def qualified_columns(table: str, columns: Sequence[str]) -> str:
    """Render ``table.column``, or ``table(a, b)`` for composite keys."""
    if len(columns) == 1:
        return f"{table}.{columns[0]}"
    return f"{table}({', '.join(columns)})"


class Detector:
    """Abstract detector. Subclasses implement ``detect`` and ``message``."""

    name: ClassVar[str] = "detector"
    description: ClassVar[str] = ""
    settings: ClassVar[Mapping[str, Mapping[str, Any]]] = {}
    # Views are fetched once at the start of a run for detectors that need them.
    needs_views: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.name = underscore(cls.__name__)
        # Missing defaults must fail when the detector is defined, not when it first runs.
        validate_settings(cls.__name__, cls.settings)

    @classmethod
    def run(
        cls,
        introspector: SchemaIntrospector,
        config: Optional[Mapping[str, Any]] = None,
        printer: Optional[IOPrinter] = None,
        models: Sequence[ModelMapping] = (),
        global_config: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        return cls(introspector, config, printer, models, global_config).execute()

    @classmethod
    def recognized_settings(cls) -> frozenset:
        return frozenset(cls.settings)

    def __init__(
        self,
        introspector: SchemaIntrospector,
        config: Optional[Mapping[str, Any]] = None,
        printer: Optional[IOPrinter] = None,
        models: Sequence[ModelMapping] = (),
        global_config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if type(self) is Detector:
            raise TypeError("Detector is abstract; instantiate a concrete detector")
        self.introspector = introspector
        self.printer = printer or IOPrinter()
        self.models: Tuple[ModelMapping, ...] = tuple(models)
        self._overrides = dict(config or {})
        self._global_config = dict(global_config or {})
        self._config: Mapping[str, Any] = MappingProxyType({})
        self._problems: Optional[List[Mapping[str, Any]]] = None
        self._views: Union[Tuple[str, ...], Any] = UNSUPPORTED
        self._consumed = False

    def execute(self) -> bool:
        if self._consumed:
            raise RuntimeError(f"{self.name} has already run; create a new detector to run it again")
        self._consumed = True

        self._config = effective_config(type(self), self._overrides, self._global_config)
        self._problems = []
        if self.needs_views:
            views = self.introspector.list_views()
            self._views = views if views is UNSUPPORTED else tuple(views)

        logger.debug("Running %s", self.name)
        problems = self._problems
        try:
            self.detect()
        finally:
            self._problems = None

        success = ProblemReporter(self.printer).report(self.message, problems)
        logger.debug("%s finished with %d problem(s)", self.name, len(problems))
        return success

    # ----------------------------------------------------------------------------------
    # Subclass contract
    # ----------------------------------------------------------------------------------
    def detect(self) -> None:
        raise NotImplementedError("detect should be implemented by a subclass")

    def message(self, **attrs: Any) -> str:
        raise NotImplementedError("message should be implemented by a subclass")

    # ----------------------------------------------------------------------------------
    # Helpers available to detect()
    # ----------------------------------------------------------------------------------
    def problem(self, **attrs: Any) -> None:
        if self._problems is None:
            raise RuntimeError("problems can only be reported while the detector runs")
        self._problems.append(MappingProxyType(dict(attrs)))

    def setting(self, key: str) -> Any:
        try:
            return self._config[key]
        except KeyError:
            raise ConfigurationError(f"{type(self).__name__} does not declare the setting {key}") from None

    def warning(self, message: str) -> None:
        # Warnings go to the log so the printer only ever receives problem lines.
        logger.warning(message)

    def ignored_table(self, table_name: str) -> bool:
        return is_ignored(table_name, self.setting("ignore_tables"))

    @property
    def views(self) -> Union[Tuple[str, ...], Any]:
        return self._views

    def tables(self) -> List[str]:
        return self.introspector.list_tables()

    def table_exists(self, table_name: str) -> bool:
        return self.introspector.table_exists(table_name)

    def indexes(self, table_name: str) -> List[Index]:
        return self.introspector.list_indexes(table_name)

    def columns(self, table_name: str) -> List[Column]:
        return self.introspector.list_columns(table_name)

    def foreign_keys(self, table_name: str) -> List[ForeignKey]:
        return self.introspector.list_foreign_keys(table_name)

    def primary_key(self, table_name: str) -> Optional[Column]:
        return self.introspector.primary_key_column(table_name)

    def column(self, table_name: str, column_name: str) -> Optional[Column]:
        return self.introspector.find_column(table_name, column_name)
