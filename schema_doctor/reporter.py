"""Turns the problems collected during one detector run into output lines."""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from schema_doctor.printers import IOPrinter

logger = logging.getLogger(__name__)


class ProblemReporter:
    """Renders problems in emission order and reduces them to a success flag."""

    def __init__(self, printer: IOPrinter) -> None:
        self.printer = printer

    def report(self, render: Callable[..., str], problems: Sequence[Mapping[str, Any]]) -> bool:
        for problem in problems:
            self.printer.write(render(**problem))
        logger.debug("Reported %d problem(s)", len(problems))
        return not problems
