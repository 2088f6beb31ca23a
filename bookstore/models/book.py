"""
Book Model

The central catalog record. A book belongs to one category and carries a
stock counter that only the purchase ledger changes after creation.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.database import Base

if TYPE_CHECKING:
    from bookstore.models.category import Category
    from bookstore.models.purchase import Purchase
    from bookstore.models.review import Review


class Book(Base):
    """
    Book model representing a title for sale.

    Table: books

    Fields:
    - name: Book title (required)
    - price: Non-negative price with 2 decimal precision
    - description: Free text
    - category_name: Owning category
    - cover_path: Opaque reference supplied by the file provider
    - stock: Units available, never below zero

    Example:
        book = Book(
            name="Dune",
            price=Decimal("9.99"),
            category_name="Science",
            stock=3,
        )
    """

    __tablename__ = "books"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    name: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    # Numeric(10, 2): Decimal, not float, for money
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Book price"
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Book description or summary"
    )

    category_name: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("categories.name"),
        index=True,
        nullable=False,
    )

    # Never interpreted by the core
    cover_path: Mapped[Optional[str]] = mapped_column(
        String(1000),
        nullable=True,
        comment="Opaque cover image reference"
    )

    stock: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Units available for purchase"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    category: Mapped["Category"] = relationship(
        "Category",
        back_populates="books",
    )

    reviews: Mapped[List["Review"]] = relationship(
        "Review",
        back_populates="book",
    )

    purchases: Mapped[List["Purchase"]] = relationship(
        "Purchase",
        back_populates="book",
    )

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_book_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_book_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, name='{self.name}', stock={self.stock})"
