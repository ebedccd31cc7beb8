"""Fatal error raised when the database driver reports a failure."""

from __future__ import annotations

from typing import Literal

FailureStage = Literal["connect", "prepare", "execute"]


class FatalDatabaseError(SystemExit):
    """Terminate the process with the raw driver error message.

    The exit code is the driver message itself, so when nothing intercepts the
    exception the interpreter prints it to stderr and exits with status 1.
    """

    def __init__(self, driver_message: str, *, stage: FailureStage) -> None:
        super().__init__(driver_message)
        self.driver_message = driver_message
        self.stage = stage

    def __str__(self) -> str:
        return self.driver_message


__all__ = ["FailureStage", "FatalDatabaseError"]
