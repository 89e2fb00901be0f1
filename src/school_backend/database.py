from contextlib import contextmanager
from typing import Generator, Callable, Iterator, Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool
import sqlalchemy.exc as sa_exc

from school_backend.settings import settings

_engine: Optional[Engine] = None
SessionLocal: Optional[Callable[[], Session]] = None


def build_engine(database_url: str) -> Engine:
    """
    Create an engine for ``database_url``.

    sqlite gets a StaticPool so every session of the process sees the same
    (possibly in-memory) database; anything else gets the pooled postgres
    configuration.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )

    return create_engine(
        database_url,
        poolclass=QueuePool,
        pool_size=10,
        max_overflow=20,
        pool_timeout=30,
        pool_recycle=1800,     # 30 min - protects against idle disconnects
        pool_pre_ping=True,    # avoids stale connections
        pool_use_lifo=True,
        future=True
    )


def build_session_factory(engine: Engine) -> Callable[[], Session]:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        expire_on_commit=False,  # records are serialized after commit
        autoflush=False,
        class_=Session
    )


def configure_engine(engine: Engine) -> Callable[[], Session]:
    """Install ``engine`` as the process engine and return its session factory."""
    global _engine, SessionLocal
    _engine = engine
    SessionLocal = build_session_factory(engine)
    return SessionLocal


def get_engine() -> Engine:
    """Process engine, built lazily from settings on first use."""
    if _engine is None:
        configure_engine(build_engine(settings.DATABASE_URL))
    return _engine


def get_session_factory() -> Callable[[], Session]:
    get_engine()
    return SessionLocal


def init_db(engine: Optional[Engine] = None) -> None:
    """Create all entity tables that do not exist yet."""
    from school_backend.model import Base

    Base.metadata.create_all(bind=engine or get_engine())


@contextmanager
def session_scope(session_factory: Callable[[], Session]) -> Iterator[Session]:
    """
    Transactional session scope.

    Commits on success, rolls back on any exception and always closes.
    """
    db = session_factory()
    try:
        yield db

        if db.in_transaction():
            db.commit()
    except Exception:
        if db.in_transaction():
            db.rollback()
        raise
    finally:
        db.close()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: provides a database session."""
    try:
        with session_scope(get_session_factory()) as db:
            yield db
    except sa_exc.TimeoutError as e:  # QueuePool acquisition timed out
        from school_backend.exceptions.exceptions import ServiceUnavailableException
        raise ServiceUnavailableException(
            detail="Database is busy. Please retry shortly.",
            headers={"Retry-After": "2"}
        ) from e
