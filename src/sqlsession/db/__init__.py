"""Database session helpers."""

from __future__ import annotations

from .base import ResultProtocol, RowCallback
from .result import QueryResult, Row
from .session import DEFAULT_DRIVER, Database

__all__ = ["DEFAULT_DRIVER", "Database", "QueryResult", "ResultProtocol", "Row", "RowCallback"]
