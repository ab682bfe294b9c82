"""
Module: kitstock_kernel.db.engine
Responsibility: SQLAlchemy engine initialization, session factory management
    and transactional scope utilities.  Single point of database connection
    configuration for the whole system.
Architecture position: Kernel > DB.  May import from db/base.py, exceptions
    and logging_config.  MUST NOT import from services/, selectors/ or
    domain/ (create_tables imports the models package so Base.metadata is
    complete).

Invariants enforced:
    - PostgreSQL runs at READ COMMITTED; stock counters rely on single-row
      conditional UPDATEs whose predicate is re-evaluated after any row
      lock wait, so no read-modify-write happens in Python.
    - SQLite opens every transaction with BEGIN IMMEDIATE, taking the write
      lock up front.  Writers are serialized; the busy timeout makes a
      second writer wait instead of failing.
    - Foreign keys are enforced on SQLite (PRAGMA foreign_keys=ON).

Failure modes:
    - RuntimeError if get_engine/get_session/get_session_factory is called
      before init_engine_from_url().
    - OperationalError ("database is locked") on SQLite when a writer waits
      longer than sqlite_busy_timeout.

Limitations:
    - SQLite only: BEGIN IMMEDIATE is also issued for read-only units of
      work, so facade reads queue behind writers and behind each other.
      PostgreSQL reads run concurrently and never take the write lock.
"""

import atexit
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from kitstock_kernel.exceptions import KitStockError
from kitstock_kernel.logging_config import get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None


def _install_sqlite_transaction_hooks(engine: Engine) -> None:
    """
    Take over transaction control from pysqlite.

    pysqlite defers BEGIN until the first DML statement and does not emit
    it for SELECTs, which breaks SAVEPOINT and leaves reads outside the
    transaction.  Disabling its handling and emitting BEGIN IMMEDIATE
    ourselves gives each unit of work the write lock for its whole span.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 20,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
    sqlite_busy_timeout: float = 30.0,
) -> Engine:
    """
    Build the process-wide engine and session factory.

    Postconditions: module-level engine and session factory are set; all
    subsequent get_engine/get_session calls use them.  A second call
    replaces the first.

    Args:
        database_url: postgresql://... or sqlite:///path (sqlite:// for an
            in-memory database shared across threads).
        echo: Echo SQL to the sqlalchemy.engine logger.
        pool_*, max_overflow: pool tuning, ignored for SQLite.
        sqlite_busy_timeout: Seconds a SQLite writer waits for the lock.
    """
    global _engine, _SessionFactory

    url = make_url(database_url)
    dialect = url.get_backend_name()

    if dialect == "sqlite":
        kwargs: dict = {
            "connect_args": {
                "check_same_thread": False,
                "timeout": sqlite_busy_timeout,
            },
        }
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        _engine = create_engine(database_url, echo=echo, **kwargs)
        _install_sqlite_transaction_hooks(_engine)
    else:
        _engine = create_engine(
            database_url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=pool_pre_ping,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
            isolation_level="READ COMMITTED",
        )

    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    logger.info(
        "engine_initialized",
        extra={"dialect": dialect, "echo": echo},
    )
    return _engine


def _not_initialized() -> RuntimeError:
    return RuntimeError("No database configured; call init_engine_from_url() first")


def get_engine() -> Engine:
    if _engine is None:
        raise _not_initialized()
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """The shared sessionmaker.  Open one session per thread or request."""
    if _SessionFactory is None:
        raise _not_initialized()
    return _SessionFactory


def get_session() -> Session:
    return get_session_factory()()


@contextmanager
def session_scope(
    factory: sessionmaker[Session] | None = None,
) -> Generator[Session, None, None]:
    """
    One unit of work: commit when the block exits cleanly, roll back and
    re-raise when it does not.  The session is closed either way.

    Usage:
        with session_scope() as session:
            ledger = StockLedger(session)
            ledger.adjust_stock(ItemKind.KIT, kit_id, -3)
    """
    session = factory() if factory is not None else get_session()
    logger.debug("transaction_started")
    try:
        yield session
        session.commit()
        logger.debug("transaction_committed")
    except KitStockError as exc:
        session.rollback()
        logger.info(
            "transaction_rolled_back",
            extra={"error_code": exc.code, "error": str(exc)},
        )
        raise
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Create all tables defined in kitstock_kernel.models."""
    from kitstock_kernel.db.base import Base
    import kitstock_kernel.models  # noqa: F401

    Base.metadata.create_all(get_engine())


def drop_tables() -> None:
    """Drop every kitstock table.  Test teardown only."""
    from kitstock_kernel.db.base import Base
    import kitstock_kernel.models  # noqa: F401

    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _SessionFactory
    if _engine is not None:
        _engine.dispose()
    _engine, _SessionFactory = None, None


@atexit.register
def _dispose_on_exit():
    if _engine is not None:
        _engine.dispose()

