"""
Category Model

A category is identified by its unique name. Categories are created once
and never renamed or deleted; every book belongs to exactly one.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.database import Base

if TYPE_CHECKING:
    from bookstore.models.book import Book


class Category(Base):
    """
    Category model.

    Table: categories

    Example:
        category = Category(name="Science Fiction")
    """

    __tablename__ = "categories"

    # The name is the natural key; books reference it directly
    name: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
        comment="Category name (e.g., 'Fiction', 'History')"
    )

    books: Mapped[List["Book"]] = relationship(
        "Book",
        back_populates="category",
    )

    def __repr__(self) -> str:
        return f"Category(name='{self.name}')"
