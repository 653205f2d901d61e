"""
Database session management.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from skillswap.core.config import settings
from skillswap.db.base import Base


def create_db_engine(url: str, echo: bool = False, **kwargs) -> Engine:
    """
    Create an engine for the given URL.

    SQLite connections are opened with ``check_same_thread=False`` and have
    foreign key enforcement switched on, so cascades behave as on MySQL.
    Other backends run at READ COMMITTED.
    """
    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(url, echo=echo, connect_args=connect_args, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    # Locking reads and plain reads both see the latest committed rows, which
    # the reputation recompute relies on after taking its row lock.
    kwargs.setdefault("isolation_level", "READ COMMITTED")
    return create_engine(url, echo=echo, pool_pre_ping=True, pool_recycle=3600, **kwargs)


engine = create_db_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None):
    """Initialize database tables."""
    # Registers every model on Base.metadata
    import skillswap.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
