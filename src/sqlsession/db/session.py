"""Database session owning a single driver connection."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, CursorResult, Engine
from sqlalchemy.exc import DBAPIError, ProgrammingError, SQLAlchemyError

from ..core.config import Settings, get_settings
from ..errors import FailureStage, FatalDatabaseError
from .base import ResultProtocol, RowCallback
from .placeholders import (
    bind_parameters,
    build_call_statement,
    count_placeholders,
    dialect_rules,
    translate_placeholders,
)
from .result import QueryResult

logger = logging.getLogger(__name__)

DEFAULT_DRIVER = "mysql+mysqlconnector"


def _driver_message(exc: BaseException | str) -> str:
    """Return the raw error text reported by the driver."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


class Database:
    """Run prepared statements and stored procedures over one connection.

    The connection is opened on construction in autocommit mode and closed by
    :meth:`close`, on leaving a ``with`` block, or when the session is garbage
    collected. Every driver failure is fatal: the raw driver message is logged
    and :class:`~sqlsession.errors.FatalDatabaseError` terminates the process.
    """

    def __init__(
        self,
        host: str,
        user: str,
        password: str,
        database: str,
        *,
        port: int | None = None,
        driver: str | None = None,
        echo: bool = False,
    ) -> None:
        self.host = host
        self.user = user
        self.password = password
        self.database = database
        self.port = port
        self.driver = driver or DEFAULT_DRIVER
        self._engine: Engine | None = None
        self._connection: Connection | None = None
        self._affected_rows = -1
        self._insert_id: Any | None = None

        url = URL.create(
            self.driver,
            username=user or None,
            password=password or None,
            host=host or None,
            port=port,
            database=database or None,
        )
        try:
            self._engine = create_engine(url, echo=echo)
            connection = self._engine.connect()
            self._connection = connection.execution_options(isolation_level="AUTOCOMMIT")
        except (SQLAlchemyError, ImportError) as exc:
            self.close()
            raise self._fatal("connect", exc) from exc
        logger.debug(
            "Opened database session",
            extra={"db_driver": self.driver, "db_host": host, "db_name": database},
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "Database":
        """Open a session using the configured connection parameters."""

        settings = settings or get_settings()
        return cls(
            settings.db_host,
            settings.db_user,
            settings.db_password.get_secret_value(),
            settings.db_name,
            port=settings.db_port,
            driver=settings.db_driver,
            echo=settings.db_echo,
        )

    @property
    def connection(self) -> Connection | None:
        return self._connection

    @property
    def affected_rows(self) -> int:
        """Row count the driver reported for the last statement, ``-1`` if unknown."""
        return self._affected_rows

    @property
    def insert_id(self) -> Any | None:
        """Row id the driver reported for the last statement, ``None`` after a query returning rows."""
        return self._insert_id

    @property
    def closed(self) -> bool:
        return self._connection is None

    def _fatal(self, stage: FailureStage, error: BaseException | str) -> FatalDatabaseError:
        message = _driver_message(error)
        logger.error(
            "Database %s failed: %s",
            stage,
            message,
            extra={"db_stage": stage, "db_host": self.host, "db_name": self.database},
        )
        return FatalDatabaseError(message, stage=stage)

    def query(self, sql: str, *values: Any) -> QueryResult | None:
        """Execute ``sql`` with ``values`` bound positionally to its ``?`` markers.

        Returns a buffered :class:`QueryResult` when the statement produced a
        result set and ``None`` otherwise.
        """
        connection = self._connection
        if connection is None:
            raise self._fatal("prepare", "Database session is closed")

        dialect = connection.dialect
        escape_percent, backslash_escapes = dialect_rules(dialect)
        expected = count_placeholders(sql, backslash_escapes=backslash_escapes)
        if expected != len(values):
            raise self._fatal(
                "prepare",
                f"Statement expects {expected} parameter(s) but {len(values)} were bound",
            )

        paramstyle = dialect.paramstyle
        logger.debug("Executing statement", extra={"statement": sql, "parameter_count": len(values)})
        try:
            if values:
                statement = translate_placeholders(
                    sql,
                    paramstyle,
                    escape_percent=escape_percent,
                    backslash_escapes=backslash_escapes,
                )
                cursor_result = connection.exec_driver_sql(statement, bind_parameters(values, paramstyle))
            else:
                cursor_result = connection.exec_driver_sql(sql)
        except ProgrammingError as exc:
            raise self._fatal("prepare", exc) from exc
        except DBAPIError as exc:
            raise self._fatal("execute", exc) from exc

        return self._materialize(cursor_result)

    def _materialize(self, cursor_result: CursorResult[Any]) -> QueryResult | None:
        try:
            self._affected_rows = cursor_result.rowcount
            self._insert_id = None
            if not cursor_result.returns_rows:
                self._insert_id = cursor_result.lastrowid
                return None
            return QueryResult(list(cursor_result.keys()), cursor_result.fetchall())
        except DBAPIError as exc:
            raise self._fatal("execute", exc) from exc
        finally:
            cursor_result.close()

    def procedure(self, name: str, *values: Any) -> QueryResult | None:
        """Call stored procedure ``name`` with one bound marker per value."""
        return self.query(build_call_statement(name, len(values)), *values)

    @staticmethod
    def fetch_all(result: ResultProtocol | None, callback: RowCallback | None = None) -> list[Any]:
        """Collect every row of ``result``, passing each through ``callback`` when given.

        A falsy ``result`` yields an empty list. The result is freed once the
        last row has been read.
        """
        data: list[Any] = []
        if not result:
            return data

        for row in iter(result.fetch_row, None):
            if callback is not None:
                row = callback(row)
            data.append(row)

        result.free()
        return data

    def close(self) -> None:
        """Close the connection and release the engine. Safe to call repeatedly."""

        connection, self._connection = self._connection, None
        if connection is not None:
            connection.close()
            logger.debug("Closed database session", extra={"db_host": self.host, "db_name": self.database})
        engine, self._engine = self._engine, None
        if engine is not None:
            engine.dispose()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_engine", None) is not None or getattr(self, "_connection", None) is not None:
            self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"Database(driver={self.driver!r}, host={self.host!r}, database={self.database!r}, {state})"


__all__ = ["DEFAULT_DRIVER", "Database"]
