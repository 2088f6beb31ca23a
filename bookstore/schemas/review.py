"""
Review Pydantic Schemas

Schemas:
- ReviewCreate: Post a review, or a reply when parent_id is set
- ReviewResponse: A single review with its cached reaction counters
- ReviewNodeResponse: A review with its nested replies (thread view)
- ReactionRequest / ReactionResponse: Like or Dislike on a review
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookstore.models.reaction import ReactionKind


class ReviewCreate(BaseModel):
    """
    Schema for creating a review.

    Example request body:
    {
        "text": "Loved the world building.",
        "parent_id": null
    }
    """

    text: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="Review text",
        examples=["Loved the world building."],
    )
    parent_id: Optional[int] = Field(
        default=None,
        ge=1,
        description="Review being replied to (same book)",
    )

    @field_validator("text")
    @classmethod
    def text_must_not_be_empty(cls, v: str) -> str:
        """Validate text is not just whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Review text cannot be empty or whitespace")
        return v


class ReviewResponse(BaseModel):
    """Schema for a single review."""

    id: int = Field(..., description="Unique review identifier")
    book_id: int = Field(..., description="ID of the reviewed book")
    user_login: str = Field(..., description="Author login")
    text: str = Field(..., description="Review text")
    parent_id: Optional[int] = Field(default=None, description="Parent review, if a reply")
    likes: int = Field(default=0, ge=0, description="Number of Like reactions")
    dislikes: int = Field(default=0, ge=0, description="Number of Dislike reactions")
    created_at: datetime = Field(..., description="When the review was posted")

    model_config = ConfigDict(from_attributes=True)


class ReviewNodeResponse(ReviewResponse):
    """A review and its replies, recursively, ordered by id."""

    replies: list["ReviewNodeResponse"] = Field(
        default_factory=list,
        description="Direct replies to this review",
    )

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "book_id": 42,
                "user_login": "reader",
                "text": "Great start, slow middle.",
                "parent_id": None,
                "likes": 3,
                "dislikes": 0,
                "created_at": "2024-01-15T10:30:00Z",
                "replies": [
                    {
                        "id": 2,
                        "book_id": 42,
                        "user_login": "critic",
                        "text": "The middle is the point.",
                        "parent_id": 1,
                        "likes": 1,
                        "dislikes": 1,
                        "created_at": "2024-01-15T11:00:00Z",
                        "replies": [],
                    }
                ],
            }
        },
    )


class ReviewThreadResponse(BaseModel):
    """Whole discussion of a book."""

    book_id: int = Field(..., description="Book ID")
    total: int = Field(..., ge=0, description="Reviews in the thread, replies included")
    items: list[ReviewNodeResponse] = Field(..., description="Root reviews")


class ReactionRequest(BaseModel):
    kind: ReactionKind = Field(..., description="Like or Dislike", examples=["Like"])


class ReactionResponse(BaseModel):
    """The caller's reaction and the review's current counters."""

    review_id: int = Field(..., description="Review ID")
    kind: Optional[ReactionKind] = Field(default=None, description="Caller's reaction, if any")
    likes: int = Field(..., ge=0)
    dislikes: int = Field(..., ge=0)
