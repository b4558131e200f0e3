"""
Database engine and session management.

The engine is created once per application (see ``main.lifespan``), kept on
``app.state`` and disposed on shutdown.
"""

import logging
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger("mealtrack.database")

# Create SQLAlchemy Base
Base = declarative_base()


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine for ``url``.

    SQLite connections get foreign keys switched on, and an in-memory SQLite
    database is shared by every session through a single static connection.
    """
    kwargs = {"echo": echo, "future": True}
    if _is_sqlite(url):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"):
            kwargs["poolclass"] = StaticPool

    engine = create_engine(url, **kwargs)
    if _is_sqlite(url):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    logger.info("Database engine created dialect=%s", engine.dialect.name)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to ``engine``"""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)


def init_database(engine: Engine):
    """Create all tables that do not exist yet"""
    with engine.begin() as conn:
        Base.metadata.create_all(bind=conn)
    logger.info("Database tables created successfully")


def dispose_engine(engine: Engine):
    """Release every pooled connection"""
    engine.dispose()
    logger.info("Database engine disposed")
