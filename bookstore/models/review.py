"""
Review Model

A review is a comment on a book, optionally replying to another review of
the same book. Replies form a tree that is rebuilt on read from the flat
rows (see bookstore.services.reviews).

likes/dislikes are denormalized counters owned by the reaction
aggregator; nothing else writes them.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.database import Base

if TYPE_CHECKING:
    from bookstore.models.book import Book
    from bookstore.models.reaction import Reaction
    from bookstore.models.user import User


class Review(Base):
    """
    Review model for book discussions.

    Attributes:
        id: Primary key, also the reply ordering key
        book_id: Foreign key to books table
        user_login: Author of the review
        text: Review body
        parent_id: Review this one replies to (same book), or None
        likes: Cached count of Like reactions
        dislikes: Cached count of Dislike reactions
        created_at: When the review was submitted
    """

    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id"),
        nullable=False,
        index=True,
    )
    user_login: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("users.login"),
        nullable=False,
        index=True,
    )

    text: Mapped[str] = mapped_column(Text, nullable=False)

    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("reviews.id"),
        nullable=True,
        index=True,
    )

    # Denormalized reaction counters
    likes: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )
    dislikes: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    book: Mapped["Book"] = relationship("Book", back_populates="reviews")
    user: Mapped["User"] = relationship("User", back_populates="reviews")
    reactions: Mapped[List["Reaction"]] = relationship(
        "Reaction",
        back_populates="review",
    )

    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_review_likes_non_negative"),
        CheckConstraint("dislikes >= 0", name="ck_review_dislikes_non_negative"),
    )

    def __repr__(self) -> str:
        return (
            f"<Review(id={self.id}, book_id={self.book_id}, "
            f"user_login={self.user_login!r}, parent_id={self.parent_id})>"
        )
