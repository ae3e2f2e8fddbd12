"""SQL engine and session handling for the namespace tables.

SQLite serves local development and tests, MySQL (through pymysql) serves
production. Sessions never autocommit; ``session_scope`` owns the
transaction.

Usage:
    from docspace.db.mysql import get_session_factory, session_scope

    with session_scope(get_session_factory()) as db:
        db.execute(select(FolderRecord))
"""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from docspace.settings import settings
from docspace.utils import get_logger

logger = get_logger(__name__)

MYSQL_POOL_RECYCLE_SECONDS = 3600
MYSQL_WAIT_TIMEOUT_SECONDS = 28800


def _resolve_url(database_url: str | None) -> str:
    url = database_url or settings.get_database_url_auto()
    if url.startswith("mysql://"):
        url = "mysql+pymysql://" + url[len("mysql://") :]
    return url


def create_db_engine(database_url: str | None = None) -> Engine:
    """Engine for database_url, or the settings-derived URL.

    In-memory SQLite is pinned to one connection (StaticPool) so every
    session sees the same tables.
    """
    url = _resolve_url(database_url)
    echo = settings.debug and settings.environment == "local-dev"

    if url.startswith("sqlite"):
        kwargs: dict = {"echo": echo, "connect_args": {"check_same_thread": False}}
        if url == "sqlite://" or ":memory:" in url:
            kwargs["poolclass"] = StaticPool
        logger.info(f"SQL namespace store on SQLite: {url}")
        return create_engine(url, **kwargs)

    engine = create_engine(
        url,
        echo=echo,
        pool_size=settings.mysql_pool_size,
        max_overflow=settings.mysql_max_overflow,
        pool_pre_ping=settings.mysql_pool_pre_ping,
        pool_recycle=MYSQL_POOL_RECYCLE_SECONDS,
    )

    @event.listens_for(engine, "connect")
    def set_wait_timeout(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute(f"SET SESSION wait_timeout = {MYSQL_WAIT_TIMEOUT_SECONDS}")
        cursor.close()

    logger.info(f"SQL namespace store on MySQL: {url.rsplit('@', 1)[-1]}")
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def get_engine() -> Engine:
    """Process-wide engine, created on first use."""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def get_session_factory() -> sessionmaker:
    """Process-wide session factory bound to get_engine()."""
    global _session_factory
    if _session_factory is None:
        _session_factory = create_session_factory(get_engine())
    return _session_factory


@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """Commit when the block exits cleanly, roll back when it raises."""
    db = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def check_connection(engine: Engine | None = None) -> bool:
    """True when a trivial query succeeds."""
    try:
        with (engine or get_engine()).connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database connection check failed: {e}")
        return False
    return True


def init_db(engine: Engine | None = None) -> None:
    """Create the namespace tables if they are missing."""
    from docspace.db.models import Base

    Base.metadata.create_all(bind=engine or get_engine())
    logger.info("Namespace tables ready")


def close_db() -> None:
    """Dispose of the process-wide engine and forget the factory."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
        logger.info("Database connections closed")
    _engine = None
    _session_factory = None
