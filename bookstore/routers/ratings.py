"""
Ratings Router

Endpoints:
- GET /books/{book_id}/rating - Average, vote count and distribution
- PUT /books/{book_id}/rating - Rate a book 1-5 (authenticated, replaces)
- GET /books/{book_id}/rating/me - Caller's own rating
"""

from fastapi import APIRouter, Request

from bookstore.config import get_settings
from bookstore.dependencies import CurrentUser, DbSession
from bookstore.schemas import BookRatingStats, RatingRequest, UserRatingResponse
from bookstore.services import catalog, ratings
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/books/{book_id}/rating",
    tags=["Ratings"],
    responses={
        404: {"description": "Book not found"},
    },
)


@router.get(
    "",
    response_model=BookRatingStats,
    summary="Get book rating statistics",
)
@limiter.limit(settings.rate_limit_default)
def get_rating_stats(request: Request, book_id: int, db: DbSession) -> BookRatingStats:
    return BookRatingStats(**ratings.get_rating_stats(db, book_id))


@router.put(
    "",
    response_model=BookRatingStats,
    summary="Rate a book",
    description="Give a book 1-5 stars. Rating again replaces your previous rating.",
)
@limiter.limit(settings.rate_limit_write)
def rate_book(
    request: Request,
    book_id: int,
    rating_data: RatingRequest,
    db: DbSession,
    current_user: CurrentUser,
) -> BookRatingStats:
    ratings.rate_book(db, current_user.login, book_id, rating_data.rating)
    return BookRatingStats(**ratings.get_rating_stats(db, book_id))


@router.get(
    "/me",
    response_model=UserRatingResponse,
    summary="Get your rating of a book",
)
@limiter.limit(settings.rate_limit_default)
def get_my_rating(
    request: Request,
    book_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> UserRatingResponse:
    catalog.get_book(db, book_id)
    return UserRatingResponse(
        book_id=book_id,
        rating=ratings.get_user_rating(db, current_user.login, book_id),
    )
