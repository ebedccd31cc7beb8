"""Prepared-statement convenience wrapper around a relational database client."""

from __future__ import annotations

__version__ = "0.1.0"

from .db import Database, QueryResult  # noqa: E402
from .errors import FatalDatabaseError  # noqa: E402

__all__ = ["Database", "FatalDatabaseError", "QueryResult", "__version__"]
