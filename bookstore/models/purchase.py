"""
Purchase Model

Append-only ledger of sales. Each row matches exactly one stock
decrement on the same book; rows are never updated or deleted.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.database import Base

if TYPE_CHECKING:
    from bookstore.models.book import Book
    from bookstore.models.user import User


class Purchase(Base):
    """One unit of a book sold to a user."""

    __tablename__ = "purchases"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_login: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("users.login"),
        nullable=False,
        index=True,
    )
    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id"),
        nullable=False,
        index=True,
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    book: Mapped["Book"] = relationship("Book", back_populates="purchases")
    user: Mapped["User"] = relationship("User", back_populates="purchases")

    def __repr__(self) -> str:
        return f"<Purchase(id={self.id}, user_login={self.user_login!r}, book_id={self.book_id})>"
