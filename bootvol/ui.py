"""User-facing message sink used by pipeline steps."""

import logging
from typing import Protocol, runtime_checkable


@runtime_checkable
class Ui(Protocol):
    """Three-level progress sink: headline, detail, error."""

    def say(self, message: str) -> None: ...

    def message(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingUi:
    """Ui that writes through a logger.

    ``say`` is an INFO headline prefixed with ``==>``, ``message`` an indented
    INFO detail line, ``error`` an ERROR record.
    """

    def __init__(self, name="bootvol.ui", prefix=""):
        self.logger = logging.getLogger(name)
        self.prefix = f"{prefix}: " if prefix else ""

    def say(self, message: str) -> None:
        self.logger.info(f"==> {self.prefix}{message}")

    def message(self, message: str) -> None:
        self.logger.info(f"    {self.prefix}{message}")

    def error(self, message: str) -> None:
        self.logger.error(f"==> {self.prefix}{message}")
