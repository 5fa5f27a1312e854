"""Schema-quality linter for SQLAlchemy-backed databases."""
from __future__ import annotations

from schema_doctor.config import CONFIG, ConfigurationError
from schema_doctor.detectors import DETECTORS, Detector
from schema_doctor.introspection import UNSUPPORTED, SchemaIntrospector, connect
from schema_doctor.printers import IOPrinter
from schema_doctor.task import Runner, Task

__version__ = "0.1.0"

__all__ = [
    "CONFIG",
    "ConfigurationError",
    "DETECTORS",
    "Detector",
    "IOPrinter",
    "Runner",
    "SchemaIntrospector",
    "Task",
    "UNSUPPORTED",
    "connect",
]
