"""
Pydantic Schemas Package

Request/response models for the HTTP layer. Import from here:
    from bookstore.schemas import BookCreate, BookResponse
"""

from bookstore.schemas.book import (
    BookCreate,
    BookDetailResponse,
    BookResponse,
    BookUpdate,
    RestockRequest,
)
from bookstore.schemas.category import CategoryCreate, CategoryResponse, CategoryStats
from bookstore.schemas.message import MessageCreate, MessageResponse
from bookstore.schemas.purchase import PurchaseListResponse, PurchaseResponse
from bookstore.schemas.rating import BookRatingStats, RatingRequest, UserRatingResponse
from bookstore.schemas.review import (
    ReactionRequest,
    ReactionResponse,
    ReviewCreate,
    ReviewNodeResponse,
    ReviewResponse,
    ReviewThreadResponse,
)
from bookstore.schemas.user import RoleUpdate, UserResponse

__all__ = [
    "BookCreate",
    "BookDetailResponse",
    "BookResponse",
    "BookUpdate",
    "RestockRequest",
    "CategoryCreate",
    "CategoryResponse",
    "CategoryStats",
    "MessageCreate",
    "MessageResponse",
    "PurchaseListResponse",
    "PurchaseResponse",
    "BookRatingStats",
    "RatingRequest",
    "UserRatingResponse",
    "ReactionRequest",
    "ReactionResponse",
    "ReviewCreate",
    "ReviewNodeResponse",
    "ReviewResponse",
    "ReviewThreadResponse",
    "RoleUpdate",
    "UserResponse",
]
