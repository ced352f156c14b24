"""Engine and session lifecycle.

The engine is created on first use, so importing the HTTP app or running the
test suite never needs ``DATABASE_URL``.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from carlot.infra.db.config import database_url, pool_options

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_engine(database_url(), **pool_options())
    return _engine


def _factory() -> sessionmaker[Session]:
    global _session_factory
    if _session_factory is None:
        # rows are handed to domain mappers after commit
        _session_factory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _session_factory


@contextmanager
def get_session() -> Iterator[Session]:
    """One unit of work: commit when the block exits cleanly, roll back otherwise.

    Repositories also commit after each write, so a workflow that fails half
    way keeps the steps it finished.
    """
    session = _factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def dispose_engine() -> None:
    """Drop pooled connections; the next ``get_engine()`` starts afresh."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
