"""
Rating Pydantic Schemas
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RatingRequest(BaseModel):
    """
    Schema for rating a book.

    Re-rating a book replaces the previous value.
    """

    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )


class UserRatingResponse(BaseModel):
    book_id: int = Field(..., description="Book ID")
    rating: Optional[int] = Field(default=None, ge=1, le=5, description="Caller's rating, if any")


class BookRatingStats(BaseModel):
    """
    Aggregated rating statistics for a book.

    average_rating is 0 when the book has no ratings.
    """

    book_id: int = Field(..., description="Book ID")
    average_rating: Decimal = Field(
        ...,
        ge=0,
        le=5,
        description="Average rating (0-5, 0 means no ratings)"
    )
    vote_count: int = Field(
        ...,
        ge=0,
        description="Number of users who rated the book"
    )
    rating_distribution: dict[int, int] = Field(
        default_factory=lambda: {1: 0, 2: 0, 3: 0, 4: 0, 5: 0},
        description="Count of each rating (1-5)"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "book_id": 42,
                "average_rating": "4.20",
                "vote_count": 125,
                "rating_distribution": {
                    "1": 5,
                    "2": 10,
                    "3": 20,
                    "4": 40,
                    "5": 50
                }
            }
        },
    )
