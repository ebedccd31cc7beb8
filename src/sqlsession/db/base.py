"""Database abstractions used across the package."""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

__all__ = ["ResultProtocol", "RowCallback"]

RowCallback = Callable[[dict[str, Any]], Any]


@runtime_checkable
class ResultProtocol(Protocol):
    """Protocol describing the minimal result surface ``fetch_all`` relies on."""

    def fetch_row(self) -> dict[str, Any] | None:  # pragma: no cover - interface definition
        """Return the next row, or ``None`` once the result is exhausted."""

    def free(self) -> None:  # pragma: no cover - interface definition
        """Release the resources backing the result."""
