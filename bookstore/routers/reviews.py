"""
Reviews Router

Endpoints:
- GET /books/{book_id}/reviews - Whole discussion thread of a book
- POST /books/{book_id}/reviews - Post a review or a reply (authenticated)
- GET /reviews/{review_id} - A single review
- PUT /reviews/{review_id}/reaction - Like or Dislike a review (authenticated)
- GET /reviews/{review_id}/reaction - Caller's reaction and the counters

Business Rules:
- A reply's parent must exist, be on the same book and not form a cycle
- One reaction per user per review; reacting again replaces it
"""

import logging

from fastapi import APIRouter, Request, status

from bookstore.config import get_settings
from bookstore.dependencies import CurrentUser, DbSession
from bookstore.schemas import (
    ReactionRequest,
    ReactionResponse,
    ReviewCreate,
    ReviewNodeResponse,
    ReviewResponse,
    ReviewThreadResponse,
)
from bookstore.services import reactions, reviews
from bookstore.services.rate_limiter import limiter
from bookstore.services.reviews import ReviewNode

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "Review or book not found"},
    },
)


# =============================================================================
# Helper Functions
# =============================================================================
def thread_to_response(roots: list[ReviewNode]) -> list[ReviewNodeResponse]:
    """
    Convert a review forest into response models.

    Nodes are converted deepest first (reverse pre-order), so each node's
    replies are ready before the node itself and no recursion is needed.
    """
    ordered = [node for root in roots for node in root.walk()]
    built: dict[int, ReviewNodeResponse] = {}

    for node in reversed(ordered):
        built[node.id] = ReviewNodeResponse(
            **ReviewResponse.model_validate(node.review).model_dump(),
            replies=[built[child.id] for child in node.replies],
        )

    return [built[root.id] for root in roots]


# =============================================================================
# Book Review Endpoints
# =============================================================================
@router.get(
    "/books/{book_id}/reviews",
    response_model=ReviewThreadResponse,
    summary="Get the review thread of a book",
    description="All reviews of a book as a forest of root reviews with nested replies.",
)
@limiter.limit(settings.rate_limit_default)
def get_book_thread(
    request: Request,
    book_id: int,
    db: DbSession,
) -> ReviewThreadResponse:
    roots = reviews.build_thread(db, book_id)
    items = thread_to_response(roots)
    total = sum(1 for root in roots for _ in root.walk())
    return ReviewThreadResponse(book_id=book_id, total=total, items=items)


@router.post(
    "/books/{book_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post a review",
    description="Post a review, or reply to one by passing parent_id. Requires authentication.",
)
@limiter.limit(settings.rate_limit_write)
def create_review(
    request: Request,
    book_id: int,
    review_data: ReviewCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> ReviewResponse:
    review = reviews.add_review(
        db,
        book_id=book_id,
        author_login=current_user.login,
        text=review_data.text,
        parent_id=review_data.parent_id,
    )
    return ReviewResponse.model_validate(review)


# =============================================================================
# Individual Review Endpoints
# =============================================================================
@router.get(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Get a review by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_review(request: Request, review_id: int, db: DbSession) -> ReviewResponse:
    return ReviewResponse.model_validate(reviews.get_review(db, review_id))


@router.put(
    "/reviews/{review_id}/reaction",
    response_model=ReactionResponse,
    summary="React to a review",
    description="Like or Dislike a review. Reacting again replaces the previous reaction.",
)
@limiter.limit(settings.rate_limit_write)
def set_reaction(
    request: Request,
    review_id: int,
    reaction_data: ReactionRequest,
    db: DbSession,
    current_user: CurrentUser,
) -> ReactionResponse:
    review = reactions.set_reaction(db, current_user.login, review_id, reaction_data.kind)
    return ReactionResponse(
        review_id=review.id,
        kind=reaction_data.kind,
        likes=review.likes,
        dislikes=review.dislikes,
    )


@router.get(
    "/reviews/{review_id}/reaction",
    response_model=ReactionResponse,
    summary="Get your reaction to a review",
)
@limiter.limit(settings.rate_limit_default)
def get_reaction(
    request: Request,
    review_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> ReactionResponse:
    review = reviews.get_review(db, review_id)
    return ReactionResponse(
        review_id=review.id,
        kind=reactions.get_user_reaction(db, current_user.login, review_id),
        likes=review.likes,
        dislikes=review.dislikes,
    )
