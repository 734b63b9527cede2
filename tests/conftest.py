from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from changebuffer.adapters.sqlalchemy import SqlAlchemyUnitOfWork, shutdown, startup
from changebuffer.config import BufferConfig, SaveClearPolicy
from tests.helpers.contacts import metadata, start_mappers

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture(autouse=True)
def default_buffer_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CHANGEBUFFER_SAVE_CLEAR_POLICY", raising=False)


@pytest.fixture
def saved_only_config() -> BufferConfig:
    return BufferConfig(save_clear_policy=SaveClearPolicy.SAVED)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyUnitOfWork]]:
    startup(engine=sqlite_engine, metadata=metadata, force=True)

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
