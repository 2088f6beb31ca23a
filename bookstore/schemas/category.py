"""
Category Pydantic Schemas
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category name",
        examples=["Fiction", "History"],
    )

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        """Validate and normalize category name."""
        if not v.strip():
            raise ValueError("Category name cannot be empty or whitespace")
        return v.strip()


class CategoryResponse(BaseModel):
    name: str = Field(..., description="Category name")

    model_config = ConfigDict(from_attributes=True)


class CategoryStats(BaseModel):
    """
    Totals across all books of a category.

    average_rating is 0 when no book in the category has been rated.
    """

    category: str = Field(..., description="Category name")
    book_count: int = Field(..., ge=0, description="Books in the category")
    purchase_count: int = Field(..., ge=0, description="Purchases of those books")
    review_count: int = Field(..., ge=0, description="Reviews and replies on those books")
    average_rating: Decimal = Field(..., ge=0, le=5, description="Mean star rating")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "category": "Fantasy",
                "book_count": 12,
                "purchase_count": 48,
                "review_count": 30,
                "average_rating": "4.10",
            }
        },
    )
