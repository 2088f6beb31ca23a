"""
Categories Router

Endpoints:
- GET /categories - List categories
- POST /categories - Create a category (admin)
- GET /categories/{name}/books - List a category's books in a chosen order
- GET /categories/{name}/stats - Purchase/review/rating totals for a category
"""

from typing import List

from fastapi import APIRouter, Request, status

from bookstore.config import get_settings
from bookstore.dependencies import AdminUser, DbSession, SortMode
from bookstore.schemas import BookResponse, CategoryCreate, CategoryResponse, CategoryStats
from bookstore.services import catalog
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
    responses={
        404: {"description": "Category not found"},
    },
)


@router.get(
    "/",
    response_model=List[CategoryResponse],
    summary="List all categories",
)
@limiter.limit(settings.rate_limit_default)
def list_categories(request: Request, db: DbSession) -> List[CategoryResponse]:
    """List all categories by name."""
    return [CategoryResponse.model_validate(c) for c in catalog.list_categories(db)]


@router.post(
    "/",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
    description="Create a new category. Admin only. Names are unique.",
)
@limiter.limit(settings.rate_limit_write)
def create_category(
    request: Request,
    category_data: CategoryCreate,
    db: DbSession,
    current_user: AdminUser,
) -> CategoryResponse:
    category = catalog.create_category(db, category_data.name)
    return CategoryResponse.model_validate(category)


@router.get(
    "/{name}/books",
    response_model=List[BookResponse],
    summary="List books in a category",
    description=(
        "Books of one category ordered by `sort`: default (id), price_asc, "
        "price_desc, popularity_desc, rating_desc or reviews_desc. "
        "Ties are broken by book id."
    ),
)
@limiter.limit(settings.rate_limit_default)
def list_category_books(
    request: Request,
    name: str,
    db: DbSession,
    sort: SortMode,
) -> List[BookResponse]:
    books = catalog.list_books(db, name, sort)
    return [BookResponse.model_validate(book) for book in books]


@router.get(
    "/{name}/stats",
    response_model=CategoryStats,
    summary="Category statistics",
)
@limiter.limit(settings.rate_limit_default)
def get_category_stats(request: Request, name: str, db: DbSession) -> CategoryStats:
    return CategoryStats(**catalog.get_category_stats(db, name))
