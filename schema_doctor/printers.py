"""Output sinks for rendered problems."""
from __future__ import annotations

import sys
from typing import Optional, TextIO


class IOPrinter:
    """Writes one line per call to any text stream (console, buffer or file)."""

    def __init__(self, io: Optional[TextIO] = None) -> None:
        self.io = io if io is not None else sys.stdout

    def write(self, line: str) -> None:
        self.io.write(line + "\n")
