"""
Catalog Store and Catalog Query Engine

Categories and books, plus the per-category listing with its six
orderings:

- DEFAULT: id order
- PRICE_ASC / PRICE_DESC: by price
- POPULARITY_DESC: by number of purchases, unsold books last
- RATING_DESC: by average rating, unrated books count as 0
- REVIEWS_DESC: by number of reviews, replies included

Every ordering breaks ties by book id ascending. Listings are computed
from the current database state on each call; nothing is cached.
"""

import logging
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookstore.exceptions import ConflictError
from bookstore.models import Book, BookRating, Category, Purchase, Review
from bookstore.services.common import atomic, get_or_raise
from bookstore.services.ratings import to_average

logger = logging.getLogger(__name__)

# Fields an admin edit may change; stock is owned by the purchase ledger
EDITABLE_BOOK_FIELDS = frozenset({"name", "price", "description", "cover_path"})
REQUIRED_BOOK_FIELDS = frozenset({"name", "price"})


class BookSortMode(str, Enum):
    """Orderings supported by list_books()."""
    DEFAULT = "default"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    POPULARITY_DESC = "popularity_desc"
    RATING_DESC = "rating_desc"
    REVIEWS_DESC = "reviews_desc"


# =============================================================================
# Categories
# =============================================================================
def category_exists(db: Session, name: str) -> bool:
    return db.get(Category, name) is not None


def get_category(db: Session, name: str) -> Category:
    return get_or_raise(db, Category, name, "Category")


def list_categories(db: Session) -> list[Category]:
    stmt = select(Category).order_by(Category.name)
    return list(db.execute(stmt).scalars().all())


def create_category(db: Session, name: str) -> Category:
    """
    Create a category.

    Raises:
        ConflictError: if a category with this name exists
    """
    if category_exists(db, name):
        raise ConflictError(f"Category {name!r} already exists")

    category = Category(name=name)
    with atomic(db, "create_category"):
        db.add(category)

    logger.info(f"Category saved: {name}")
    return category


def ensure_default_categories(db: Session, names: list[str]) -> list[Category]:
    """Create any of the given categories that don't exist yet."""
    missing = [name for name in names if not category_exists(db, name)]
    if missing:
        with atomic(db, "ensure_default_categories"):
            db.add_all(Category(name=name) for name in missing)
        logger.info(f"Created default categories: {', '.join(missing)}")

    return [get_category(db, name) for name in names]


# =============================================================================
# Books
# =============================================================================
def get_book(db: Session, book_id: int) -> Book:
    """
    Load a book by id.

    Raises:
        NotFoundError: if the book does not exist
    """
    return get_or_raise(db, Book, book_id, "Book")


def create_book(
    db: Session,
    name: str,
    price: Decimal,
    category_name: str,
    description: Optional[str] = None,
    cover_path: Optional[str] = None,
    stock: int = 0,
) -> Book:
    """
    Add a book to a category with its initial stock.

    Raises:
        NotFoundError: if the category does not exist
    """
    get_category(db, category_name)
    if stock < 0:
        raise ValueError("Initial stock cannot be negative")

    book = Book(
        name=name,
        price=price,
        description=description,
        category_name=category_name,
        cover_path=cover_path,
        stock=stock,
    )
    with atomic(db, "create_book"):
        db.add(book)

    db.refresh(book)
    logger.info(f"Book {book.id} created in {category_name}: {name}")
    return book


def update_book(db: Session, book_id: int, **changes: Any) -> Book:
    """
    Apply an admin edit to a book's descriptive fields.

    Only name, price, description and cover_path can change here.

    Raises:
        NotFoundError: if the book does not exist
        ValueError: if a non-editable field is passed, or name/price is None
    """
    illegal = set(changes) - EDITABLE_BOOK_FIELDS
    if illegal:
        raise ValueError(f"Fields not editable: {', '.join(sorted(illegal))}")
    cleared = sorted(f for f in REQUIRED_BOOK_FIELDS if f in changes and changes[f] is None)
    if cleared:
        raise ValueError(f"Fields cannot be cleared: {', '.join(cleared)}")

    book = get_book(db, book_id)
    with atomic(db, "update_book"):
        for field, value in changes.items():
            setattr(book, field, value)

    db.refresh(book)
    logger.info(f"Book {book_id} updated: {', '.join(sorted(changes)) or 'no changes'}")
    return book


def delete_book(db: Session, book_id: int) -> None:
    """
    Delete a book.

    A book that still has reviews or purchases is refused with
    ConflictError: the ORM would have to null their book_id, which the
    schema forbids. The purchase history and threads stay intact.
    """
    book = get_book(db, book_id)
    with atomic(db, "delete_book"):
        db.delete(book)
    logger.info(f"Book {book_id} deleted")


# =============================================================================
# Catalog Query Engine
# =============================================================================
def list_books(
    db: Session,
    category_name: str,
    mode: BookSortMode = BookSortMode.DEFAULT,
) -> list[Book]:
    """
    List the books of one category in the requested order.

    Aggregates are joined as grouped subqueries so books without any
    purchases, ratings or reviews are kept (outer join, COALESCE to 0).

    Raises:
        NotFoundError: if the category does not exist
    """
    get_category(db, category_name)
    mode = BookSortMode(mode)

    stmt = select(Book).where(Book.category_name == category_name)

    if mode is BookSortMode.PRICE_ASC:
        stmt = stmt.order_by(Book.price.asc())

    elif mode is BookSortMode.PRICE_DESC:
        stmt = stmt.order_by(Book.price.desc())

    elif mode is BookSortMode.POPULARITY_DESC:
        sales = (
            select(Purchase.book_id, func.count(Purchase.id).label("n"))
            .group_by(Purchase.book_id)
            .subquery()
        )
        stmt = stmt.outerjoin(sales, sales.c.book_id == Book.id).order_by(
            func.coalesce(sales.c.n, 0).desc()
        )

    elif mode is BookSortMode.RATING_DESC:
        ratings = (
            select(BookRating.book_id, func.avg(BookRating.rating).label("avg"))
            .group_by(BookRating.book_id)
            .subquery()
        )
        stmt = stmt.outerjoin(ratings, ratings.c.book_id == Book.id).order_by(
            func.coalesce(ratings.c.avg, 0).desc()
        )

    elif mode is BookSortMode.REVIEWS_DESC:
        reviews = (
            select(Review.book_id, func.count(Review.id).label("n"))
            .group_by(Review.book_id)
            .subquery()
        )
        stmt = stmt.outerjoin(reviews, reviews.c.book_id == Book.id).order_by(
            func.coalesce(reviews.c.n, 0).desc()
        )

    # Deterministic tie-break for every mode (and the whole order for DEFAULT)
    stmt = stmt.order_by(Book.id.asc())

    return list(db.execute(stmt).scalars().all())


def get_category_stats(db: Session, category_name: str) -> dict:
    """
    Totals across a category: purchases, reviews and the average rating.

    Raises:
        NotFoundError: if the category does not exist
    """
    get_category(db, category_name)

    purchase_count = db.execute(
        select(func.count(Purchase.id))
        .join(Book, Purchase.book_id == Book.id)
        .where(Book.category_name == category_name)
    ).scalar() or 0

    review_count = db.execute(
        select(func.count(Review.id))
        .join(Book, Review.book_id == Book.id)
        .where(Book.category_name == category_name)
    ).scalar() or 0

    average = db.execute(
        select(func.avg(BookRating.rating))
        .join(Book, BookRating.book_id == Book.id)
        .where(Book.category_name == category_name)
    ).scalar()

    book_count = db.execute(
        select(func.count(Book.id)).where(Book.category_name == category_name)
    ).scalar() or 0

    return {
        "category": category_name,
        "book_count": book_count,
        "purchase_count": purchase_count,
        "review_count": review_count,
        "average_rating": to_average(average),
    }

