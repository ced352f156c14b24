"""Shared plumbing for the PostgreSQL repositories."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from carlot.domain.changes import ChangeEvent, ChangeType
from carlot.domain.result import Err
from carlot.ports.change_feed import ChangeFeed

logger = logging.getLogger(__name__)


def parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None


class PostgresRepository:
    """
    Base for repositories backed by a SQLAlchemy session.

    - Each write is committed on its own, so a later failure in the same
      workflow leaves earlier writes in place
    - SQLAlchemy errors are rolled back, logged and returned as ``Err``
    - Successful writes are published to the change feed, if one is given
    """

    def __init__(self, session: Session, change_feed: ChangeFeed | None = None) -> None:
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
            change_feed: Where row changes are announced after commit
        """
        self._session = session
        self._change_feed = change_feed

    def _fail(self, operation: str, exc: SQLAlchemyError) -> Err:
        self._session.rollback()
        logger.error(
            "Store operation failed",
            exc_info=exc,
            extra={"operation": operation, "error_type": type(exc).__name__},
        )
        return Err.from_exception(exc, f"{operation} failed")

    def _publish(
        self,
        table: str,
        change_type: ChangeType,
        vendor_id: UUID | str,
        record_id: UUID | str | None,
    ) -> None:
        if self._change_feed is None:
            return
        self._change_feed.publish(
            ChangeEvent(
                table=table,
                change_type=change_type,
                vendor_id=str(vendor_id),
                record_id=str(record_id) if record_id is not None else None,
            )
        )
