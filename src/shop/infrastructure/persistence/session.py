from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from shop.infrastructure.persistence.models import Base


def create_db_engine(database_url: str, *, echo: bool = False) -> Engine:
    """
    Build an engine for *database_url* and create the tables if missing.
    """
    kwargs: dict[str, object] = {"echo": echo, "future": True}

    # SQLite needs a special flag when used from a threaded web app; an
    # in-memory database must also share one connection across threads.
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in {"sqlite://", "sqlite:///:memory:"}:
            kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **kwargs)
    Base.metadata.create_all(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
        class_=Session,
    )


@contextmanager
def transaction(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """
    Yield a session that commits on success and rolls back on error.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
