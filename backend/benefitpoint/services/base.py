"""
Base Service Class

Shared plumbing for the data access services: the injected session,
timestamp stamping and translation of store failures into DatabaseError.
"""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from benefitpoint.core.exceptions import DatabaseError, ValidationError

logger = logging.getLogger(__name__)


class StoreService:
    """Base class for services that talk to the relational store."""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def now() -> datetime:
        return datetime.now(timezone.utc)

    @contextmanager
    def store_call(self, action: str):
        """Wrap a unit of store work; any SQLAlchemy failure becomes DatabaseError."""
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Error %s: %s", action, e)
            raise DatabaseError(f"Database error: {action} failed") from e

    def save(self, row, action: str):
        """Add/commit/refresh a row and hand it back."""
        with self.store_call(action):
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        return row

    def apply_updates(self, row, updates: dict, immutable=(), required=None):
        """Copy updates onto a row, skipping immutable columns.

        ``required`` maps NOT NULL columns to their display names; an
        explicit None or blank string for one of them is a ValidationError.
        """
        changes = {field: value for field, value in updates.items() if field not in immutable}
        for field, label in (required or {}).items():
            if field not in changes:
                continue
            value = changes[field]
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(f"{label} is required")
        for field, value in changes.items():
            setattr(row, field, value)
        return row
