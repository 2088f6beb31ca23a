"""
Rating Aggregator

Each user holds at most one 1-5 star rating per book (upsert semantics).
Averages and vote counts are always computed live from the stored
ratings, so replacing a rating can't make the average drift.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookstore.exceptions import ConflictError, InvalidRatingError
from bookstore.models import Book, BookRating
from bookstore.services.common import atomic, get_or_raise
from bookstore.services.users import get_user

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5

# One retry covers the race where two first-time ratings for the same
# (user, book) insert concurrently; the loser then updates the winner's row.
UPSERT_ATTEMPTS = 2

TWO_PLACES = Decimal("0.01")


def to_average(value: object) -> Decimal:
    """Normalize an AVG() result to a 2-place Decimal, 0 when there is none."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def rate_book(db: Session, user_login: str, book_id: int, value: int) -> BookRating:
    """
    Set the user's rating for a book, replacing any previous one.

    The value is validated before anything touches the database.

    Raises:
        InvalidRatingError: value outside 1-5
        NotFoundError: unknown user or book
        ConflictError: the upsert kept losing a concurrent race
    """
    if isinstance(value, bool) or not isinstance(value, int) or not MIN_RATING <= value <= MAX_RATING:
        raise InvalidRatingError(value)

    get_user(db, user_login)
    get_or_raise(db, Book, book_id, "Book")

    attempt = 1
    while True:
        try:
            rating = _upsert_rating(db, user_login, book_id, value)
            break
        except ConflictError:
            if attempt >= UPSERT_ATTEMPTS:
                raise
            logger.warning(
                f"rate_book: concurrent insert for ({user_login}, {book_id}), retrying"
            )
            attempt += 1

    logger.info(f"{user_login} rated book {book_id}: {value}")
    return rating


def _upsert_rating(db: Session, user_login: str, book_id: int, value: int) -> BookRating:
    with atomic(db, "rate_book"):
        stmt = (
            select(BookRating)
            .where(
                BookRating.user_login == user_login,
                BookRating.book_id == book_id,
            )
            .with_for_update()
        )
        rating = db.execute(stmt).scalar_one_or_none()

        if rating is None:
            rating = BookRating(user_login=user_login, book_id=book_id, rating=value)
            db.add(rating)
        else:
            rating.rating = value
        db.flush()

    db.refresh(rating)
    return rating


def get_average(db: Session, book_id: int) -> Decimal:
    """Mean of the current ratings for a book; 0 when unrated."""
    stmt = select(func.avg(BookRating.rating)).where(BookRating.book_id == book_id)
    return to_average(db.execute(stmt).scalar())


def get_vote_count(db: Session, book_id: int) -> int:
    stmt = select(func.count(BookRating.id)).where(BookRating.book_id == book_id)
    return db.execute(stmt).scalar() or 0


def get_user_rating(db: Session, user_login: str, book_id: int) -> Optional[int]:
    stmt = select(BookRating.rating).where(
        BookRating.user_login == user_login,
        BookRating.book_id == book_id,
    )
    return db.execute(stmt).scalar_one_or_none()


def get_rating_stats(db: Session, book_id: int) -> dict:
    """
    Average, vote count and per-star distribution for a book.

    Raises:
        NotFoundError: unknown book
    """
    get_or_raise(db, Book, book_id, "Book")

    distribution = {star: 0 for star in range(MIN_RATING, MAX_RATING + 1)}
    stmt = (
        select(BookRating.rating, func.count(BookRating.id))
        .where(BookRating.book_id == book_id)
        .group_by(BookRating.rating)
    )
    for star, count in db.execute(stmt).all():
        distribution[star] = count

    return {
        "book_id": book_id,
        "average_rating": get_average(db, book_id),
        "vote_count": sum(distribution.values()),
        "rating_distribution": distribution,
    }
