import logging
import time

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import (
    DATABASE_URL,
    DB_LOG_SLOW_QUERIES,
    DB_MAX_OVERFLOW,
    DB_POOL_RECYCLE,
    DB_POOL_SIZE,
    DB_POOL_TIMEOUT,
    DB_SLOW_QUERY_THRESHOLD,
)

logger = logging.getLogger(__name__)

IS_SQLITE = DATABASE_URL.startswith("sqlite")


def _engine_options() -> dict:
    if IS_SQLITE:
        # In-memory SQLite must share one connection across threads or every request sees an empty DB
        options = {"connect_args": {"check_same_thread": False}}
        if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_pre_ping": True,
        "pool_recycle": DB_POOL_RECYCLE,
        "pool_size": DB_POOL_SIZE,
        "max_overflow": DB_MAX_OVERFLOW,
        "pool_timeout": DB_POOL_TIMEOUT,
    }


try:
    engine = create_engine(DATABASE_URL, **_engine_options())
except Exception as e:
    logger.error(f"❌ Could not create database engine for {DATABASE_URL.split('://')[0]}: {e}")
    raise

if IS_SQLITE:
    logger.info("✅ Database engine ready (SQLite)")
else:
    logger.info(f"✅ Database engine ready (pool {DB_POOL_SIZE}+{DB_MAX_OVERFLOW}, timeout {DB_POOL_TIMEOUT}s)")


def _start_timer(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault("kd_query_started", []).append(time.perf_counter())


def _log_if_slow(conn, cursor, statement, parameters, context, executemany):
    elapsed = time.perf_counter() - conn.info["kd_query_started"].pop()
    if elapsed > DB_SLOW_QUERY_THRESHOLD:
        logger.warning(f"🐌 Slow query took {elapsed:.2f}s: {statement[:200]}")


if DB_LOG_SLOW_QUERIES:
    event.listen(engine, "before_cursor_execute", _start_timer)
    event.listen(engine, "after_cursor_execute", _log_if_slow)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Request-scoped session, closed when the response is done"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
