"""Engine and session plumbing.

SQLite connections get foreign keys, a busy timeout and (for file
databases) WAL.  pysqlite's own implicit transaction handling is switched
off and every transaction starts with ``BEGIN IMMEDIATE``: writers take
the database lock up front and wait at most the busy timeout for it, so
two processes never interleave halfway through an order.
"""

import logging
import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from posledger.infrastructure.persistence.tables import Base

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str, busy_timeout_seconds: float = 5.0) -> Engine:
    url = make_url(database_url)
    is_sqlite = url.get_backend_name() == "sqlite"
    is_sqlite_memory = False
    if is_sqlite:
        is_sqlite_memory = url.database in (None, "", ":memory:") or url.query.get("mode") == "memory"

    connect_args = {}
    engine_kwargs: dict[str, object] = dict(pool_pre_ping=True)
    if is_sqlite:
        connect_args = {"check_same_thread": False, "timeout": busy_timeout_seconds}
        if is_sqlite_memory:
            engine_kwargs.update(poolclass=StaticPool)

    engine = create_engine(database_url, connect_args=connect_args, **engine_kwargs)
    if is_sqlite:
        _install_sqlite_hooks(engine, int(busy_timeout_seconds * 1000), is_sqlite_memory)
    return engine


def _install_sqlite_hooks(engine: Engine, busy_timeout_ms: int, is_memory: bool) -> None:

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute(f"PRAGMA busy_timeout={busy_timeout_ms}")
            if not is_memory:
                try:
                    cursor.execute("PRAGMA journal_mode=WAL")
                    cursor.execute("PRAGMA synchronous=NORMAL")
                except sqlite3.DatabaseError:
                    logger.warning("Could not enable WAL journal mode; using the default")
        finally:
            cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def init_schema(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
