"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from posledger.infrastructure.config import get_settings
from posledger.infrastructure.database import (
    create_db_engine,
    create_session_factory,
    init_schema,
)
from posledger.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork


@lru_cache
def engine() -> Engine:
    settings = get_settings()
    db_engine = create_db_engine(
        settings.DATABASE_URL, busy_timeout_seconds=settings.SQLITE_BUSY_TIMEOUT_SECONDS
    )
    init_schema(db_engine)
    return db_engine


@lru_cache
def session_factory() -> sessionmaker:
    return create_session_factory(engine())


def unit_of_work() -> SqlUnitOfWork:
    return SqlUnitOfWork(session_factory())


def reset() -> None:
    """Drop cached settings and engine (the next call re-reads the environment)."""
    if engine.cache_info().currsize:
        engine().dispose()
    session_factory.cache_clear()
    engine.cache_clear()
    get_settings.cache_clear()
