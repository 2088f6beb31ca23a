"""
Book Pydantic Schemas

Schemas:
- BookCreate: Admin creates a book with its initial stock
- BookUpdate: Admin edits descriptive fields (stock is not editable here)
- RestockRequest: Admin adds units through the purchase ledger
- BookResponse: Book data for API responses
- BookDetailResponse: Book plus live rating and sales figures
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookBase(BaseModel):
    """Base schema with shared book fields."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["Dune"],
    )

    price: Decimal = Field(
        ...,
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Book price",
        examples=["9.99"],
    )

    description: Optional[str] = Field(
        default=None,
        max_length=5000,
        description="Book description or summary",
    )

    cover_path: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Opaque cover reference from the file provider",
    )

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Book name cannot be empty or whitespace")
        return v.strip()


class BookCreate(BookBase):
    """
    Schema for creating a book.

    Example request body:
    {
        "name": "Dune",
        "price": "9.99",
        "category_name": "Science",
        "stock": 3
    }
    """

    category_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Owning category",
    )
    stock: int = Field(
        default=0,
        ge=0,
        description="Initial units in stock",
    )


class BookUpdate(BaseModel):
    """Partial update of a book's descriptive fields."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=500)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    description: Optional[str] = Field(default=None, max_length=5000)
    cover_path: Optional[str] = Field(default=None, max_length=1000)

    model_config = ConfigDict(extra="forbid")

    @field_validator("name", "price")
    @classmethod
    def required_columns_not_null(cls, v):
        # Omit a field to leave it unchanged; null would clear a NOT NULL column
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.strip():
            raise ValueError("Book name cannot be empty or whitespace")
        return v.strip()


class RestockRequest(BaseModel):
    quantity: int = Field(..., ge=1, le=100000, description="Units to add")


class BookResponse(BookBase):
    """Schema for book responses."""

    id: int = Field(..., description="Unique identifier")
    category_name: str = Field(..., description="Owning category")
    stock: int = Field(..., ge=0, description="Units in stock")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Dune",
                "price": "9.99",
                "description": "Desert planet politics.",
                "cover_path": "covers/dune.jpg",
                "category_name": "Science",
                "stock": 3,
            }
        },
    )


class BookDetailResponse(BookResponse):
    """Book with its live aggregates."""

    average_rating: Decimal = Field(..., ge=0, le=5, description="Mean star rating, 0 if unrated")
    vote_count: int = Field(..., ge=0, description="Number of ratings")
    review_count: int = Field(..., ge=0, description="Reviews and replies")
    purchase_count: int = Field(..., ge=0, description="Units sold")
