"""Shared fixtures for LifeBoard tests."""

import pytest

from lifeboard.slots import MemorySlots, SqliteSlots
from lifeboard.store import EntityStore


@pytest.fixture
def slots():
    return MemorySlots()


@pytest.fixture
def store(slots):
    return EntityStore(slots)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "lifeboard.db")


@pytest.fixture
def sqlite_store(db_path):
    return EntityStore(SqliteSlots(db_path))
