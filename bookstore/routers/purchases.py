"""
Purchases Router

Endpoints:
- POST /books/{book_id}/purchase - Buy one unit (authenticated)
- GET /users/me/purchases - Caller's purchase history
"""

from fastapi import APIRouter, Request, status

from bookstore.config import get_settings
from bookstore.dependencies import CurrentUser, DbSession
from bookstore.schemas import PurchaseListResponse, PurchaseResponse
from bookstore.services import purchases
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    tags=["Purchases"],
    responses={
        404: {"description": "Book not found"},
        409: {"description": "Book is out of stock"},
    },
)


@router.post(
    "/books/{book_id}/purchase",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Purchase a book",
    description="Buy one unit. Fails with 409 when the book is out of stock.",
)
@limiter.limit(settings.rate_limit_write)
def purchase_book(
    request: Request,
    book_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> PurchaseResponse:
    record = purchases.purchase(db, current_user.login, book_id)
    return PurchaseResponse.model_validate(record)


@router.get(
    "/users/me/purchases",
    response_model=PurchaseListResponse,
    summary="List your purchases",
)
@limiter.limit(settings.rate_limit_default)
def list_my_purchases(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
) -> PurchaseListResponse:
    items = purchases.list_purchases(db, current_user.login)
    return PurchaseListResponse(
        items=[PurchaseResponse.model_validate(p) for p in items],
        total=len(items),
    )
