from __future__ import annotations

from collections.abc import Iterator

import pytest

from sqlsession.core.config import get_settings
from sqlsession.db import Database


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def database() -> Iterator[Database]:
    session = Database("", "", "", ":memory:", driver="sqlite")
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def people(database: Database) -> Database:
    database.query("CREATE TABLE people (id INTEGER PRIMARY KEY, name TEXT NOT NULL, age INTEGER)")
    for name, age in (("alice", 31), ("bob", 27), ("carol", 45)):
        database.query("INSERT INTO people (name, age) VALUES (?, ?)", name, age)
    return database
