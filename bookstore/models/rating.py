"""
Book Rating Model

A user's 1-5 star rating of a book, stored in the book_reactions table.
Exactly one row per (user, book); re-rating overwrites the value.
"""

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from bookstore.database import Base


class BookRating(Base):
    """Star rating given by one user to one book."""

    __tablename__ = "book_reactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_login: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("users.login"),
        nullable=False,
    )
    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id"),
        nullable=False,
        index=True,
    )
    rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Rating from 1-5 stars",
    )

    __table_args__ = (
        UniqueConstraint("user_login", "book_id", name="uq_rating_user_book"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_rating_range"),
    )

    def __repr__(self) -> str:
        return (
            f"<BookRating(user_login={self.user_login!r}, "
            f"book_id={self.book_id}, rating={self.rating})>"
        )
