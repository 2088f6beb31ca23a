"""
Shared helpers for the core services.

atomic() wraps one core operation in a single transaction: it commits on
success, rolls back on any failure and translates SQLAlchemy errors into
the core's typed errors.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bookstore.exceptions import (
    BookstoreError,
    ConflictError,
    NotFoundError,
    StorageError,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


@contextmanager
def atomic(db: Session, action: str) -> Iterator[None]:
    """
    Run the enclosed writes as one transaction.

    Usage:
        with atomic(db, "purchase"):
            db.add(...)

    Raises:
        ConflictError: a uniqueness/integrity rule rejected the write
        StorageError: any other database failure
    """
    try:
        yield
        db.commit()
    except BookstoreError:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"{action}: integrity error, rolled back: {exc.orig}")
        raise ConflictError(f"{action} conflicted with existing data") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"{action}: database error, rolled back: {exc}")
        raise StorageError(f"{action} failed due to a storage error") from exc


def get_or_raise(db: Session, model: type[ModelT], key: object, entity: str) -> ModelT:
    """Load a row by primary key or raise NotFoundError."""
    try:
        instance = db.get(model, key)
    except SQLAlchemyError as exc:
        raise StorageError(f"Failed to load {entity} {key!r}") from exc

    if instance is None:
        raise NotFoundError(entity, key)
    return instance
