"""
Books Router

Endpoints:
- POST /books - Create a book (admin)
- GET /books/{book_id} - Book with live rating and sales figures
- PUT /books/{book_id} - Edit descriptive fields (admin)
- DELETE /books/{book_id} - Delete a book, best effort (admin)
- POST /books/{book_id}/restock - Add stock (admin)
"""

from fastapi import APIRouter, Request, status

from bookstore.config import get_settings
from bookstore.dependencies import AdminUser, DbSession
from bookstore.schemas import (
    BookCreate,
    BookDetailResponse,
    BookResponse,
    BookUpdate,
    RestockRequest,
)
from bookstore.services import catalog, purchases, ratings, reviews
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


@router.post(
    "/",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a book",
    description="Add a book to an existing category with its initial stock. Admin only.",
)
@limiter.limit(settings.rate_limit_write)
def create_book(
    request: Request,
    book_data: BookCreate,
    db: DbSession,
    current_user: AdminUser,
) -> BookResponse:
    book = catalog.create_book(db, **book_data.model_dump())
    return BookResponse.model_validate(book)


@router.get(
    "/{book_id}",
    response_model=BookDetailResponse,
    summary="Get a book by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_book(request: Request, book_id: int, db: DbSession) -> BookDetailResponse:
    """Book fields plus average rating, vote, review and purchase counts."""
    book = catalog.get_book(db, book_id)
    return BookDetailResponse(
        **BookResponse.model_validate(book).model_dump(),
        average_rating=ratings.get_average(db, book_id),
        vote_count=ratings.get_vote_count(db, book_id),
        review_count=reviews.count_reviews(db, book_id),
        purchase_count=purchases.get_purchase_count(db, book_id),
    )


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
    description="Edit name, price, description or cover. Stock changes go through restock.",
)
@limiter.limit(settings.rate_limit_write)
def update_book(
    request: Request,
    book_id: int,
    book_data: BookUpdate,
    db: DbSession,
    current_user: AdminUser,
) -> BookResponse:
    book = catalog.update_book(db, book_id, **book_data.model_dump(exclude_unset=True))
    return BookResponse.model_validate(book)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a book",
)
@limiter.limit(settings.rate_limit_write)
def delete_book(
    request: Request,
    book_id: int,
    db: DbSession,
    current_user: AdminUser,
) -> None:
    catalog.delete_book(db, book_id)


@router.post(
    "/{book_id}/restock",
    response_model=BookResponse,
    summary="Restock a book",
)
@limiter.limit(settings.rate_limit_write)
def restock_book(
    request: Request,
    book_id: int,
    restock_data: RestockRequest,
    db: DbSession,
    current_user: AdminUser,
) -> BookResponse:
    book = purchases.restock(db, book_id, restock_data.quantity)
    return BookResponse.model_validate(book)
