"""Runs detectors against one database and aggregates their outcomes."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence, Type

from schema_doctor.config import CONFIG, detector_overrides, global_settings
from schema_doctor.detectors import Detector, select_detectors
from schema_doctor.introspection import SchemaIntrospector
from schema_doctor.models import ModelMapping
from schema_doctor.printers import IOPrinter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PROBLEMS = 1
EXIT_ERROR = 2


class Task:
    """One detector invocation with its own problem list and configuration."""

    def __init__(
        self,
        detector_class: Type[Detector],
        introspector: SchemaIntrospector,
        printer: IOPrinter,
        config: Optional[Mapping[str, Any]] = None,
        models: Sequence[ModelMapping] = (),
        global_config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.detector_class = detector_class
        self.introspector = introspector
        self.printer = printer
        self.config = config
        self.models = models
        self.global_config = global_config

    def run(self) -> bool:
        return self.detector_class.run(
            self.introspector,
            config=self.config,
            printer=self.printer,
            models=self.models,
            global_config=self.global_config,
        )


class Runner:
    """Runs the selected detectors sequentially over a shared connection."""

    def __init__(
        self,
        introspector: SchemaIntrospector,
        printer: Optional[IOPrinter] = None,
        models: Sequence[ModelMapping] = (),
        config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.introspector = introspector
        self.printer = printer or IOPrinter()
        self.models = tuple(models)
        self.config = CONFIG if config is None else config

    def run(self, names: Iterable[str] = ()) -> bool:
        """Run every selected detector and return True only if all of them passed.

        Every detector runs even after an earlier one reports problems.
        Database errors propagate and stop the run.
        """
        detectors = select_detectors(names)
        shared = global_settings(self.config)
        success = True
        for detector_class in detectors:
            logger.info("Running %s", detector_class.name)
            task = Task(
                detector_class,
                self.introspector,
                self.printer,
                config=detector_overrides(detector_class.name, self.config),
                models=self.models,
                global_config=shared,
            )
            if not task.run():
                success = False
        return success


def exit_code(success: bool) -> int:
    return EXIT_OK if success else EXIT_PROBLEMS
