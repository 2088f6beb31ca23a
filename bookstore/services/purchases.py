"""
Purchase Ledger

The only module that changes book stock.

purchase() is a single transaction made of a conditional decrement

    UPDATE books SET stock = stock - 1 WHERE id = :id AND stock > 0

followed by the ledger insert. The stock check and the decrement are one
statement, so two buyers racing for the last unit can't both succeed:
the database serializes the UPDATEs and the second one matches no row.
If the insert fails the decrement is rolled back with it.
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from bookstore.exceptions import InsufficientStockError, NotFoundError
from bookstore.models import Book, Purchase
from bookstore.services.catalog import get_book
from bookstore.services.common import atomic
from bookstore.services.users import get_user

logger = logging.getLogger(__name__)


def purchase(db: Session, user_login: str, book_id: int) -> Purchase:
    """
    Sell one unit of a book to a user.

    Raises:
        NotFoundError: unknown user or book
        InsufficientStockError: the book's stock is already 0
    """
    get_user(db, user_login)

    with atomic(db, "purchase"):
        result = db.execute(
            update(Book)
            .where(Book.id == book_id, Book.stock > 0)
            .values(stock=Book.stock - 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            # Nothing was decremented: either no such book or no stock
            if db.get(Book, book_id) is None:
                raise NotFoundError("Book", book_id)
            raise InsufficientStockError(book_id)

        record = Purchase(user_login=user_login, book_id=book_id)
        db.add(record)

    db.refresh(record)
    logger.info(f"Purchase {record.id}: {user_login} bought book {book_id}")
    return record


def restock(db: Session, book_id: int, quantity: int) -> Book:
    """
    Add units to a book's stock (admin operation).

    Raises:
        NotFoundError: unknown book
        ValueError: quantity is not positive
    """
    if quantity <= 0:
        raise ValueError("Restock quantity must be positive")
    get_book(db, book_id)

    with atomic(db, "restock"):
        db.execute(
            update(Book)
            .where(Book.id == book_id)
            .values(stock=Book.stock + quantity)
            .execution_options(synchronize_session=False)
        )

    book = get_book(db, book_id)
    db.refresh(book)
    logger.info(f"Book {book_id} restocked by {quantity}, now {book.stock}")
    return book


def list_purchases(db: Session, user_login: str) -> list[Purchase]:
    """A user's purchases, oldest first."""
    get_user(db, user_login)
    stmt = (
        select(Purchase)
        .where(Purchase.user_login == user_login)
        .order_by(Purchase.id)
    )
    return list(db.execute(stmt).scalars().all())


def get_purchase_count(db: Session, book_id: int) -> int:
    stmt = select(func.count(Purchase.id)).where(Purchase.book_id == book_id)
    return db.execute(stmt).scalar() or 0
