"""
FastAPI Application Entry Point

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() returns a configured app, so tests can build their own

2. Lifespan Events
   - startup seeds the default categories; schema changes go through Alembic

3. Exception Handlers
   - Core errors (bookstore.exceptions) become JSON responses with the
     matching status code
   - Unexpected database errors are logged and hidden from clients
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from bookstore.config import get_settings
from bookstore.database import SessionLocal
from bookstore.dependencies import DbSession
from bookstore.exceptions import (
    BookstoreError,
    ConflictError,
    InsufficientStockError,
    InvalidParentError,
    InvalidRatingError,
    NotFoundError,
    StorageError,
)
from bookstore.routers import (
    books_router,
    categories_router,
    messages_router,
    purchases_router,
    ratings_router,
    reviews_router,
    users_router,
)
from bookstore.services import catalog
from bookstore.services.rate_limiter import limiter, rate_limit_exceeded_handler

# =============================================================================
# Logging Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Most specific first: the handler picks the first matching class
ERROR_STATUS: list[tuple[type[BookstoreError], int, str]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (InvalidParentError, status.HTTP_400_BAD_REQUEST, "invalid_parent"),
    (InvalidRatingError, status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_rating"),
    (InsufficientStockError, status.HTTP_409_CONFLICT, "insufficient_stock"),
    (ConflictError, status.HTTP_409_CONFLICT, "conflict"),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE, "storage_error"),
]


def error_response(exc: BookstoreError) -> JSONResponse:
    """Map a core error to its HTTP status and a JSON body."""
    for error_type, status_code, code in ERROR_STATUS:
        if isinstance(exc, error_type):
            break
    else:
        status_code, code = status.HTTP_400_BAD_REQUEST, "bad_request"

    headers = {"Retry-After": "1"} if code in {"conflict", "storage_error"} else None
    return JSONResponse(
        status_code=status_code,
        content={"error": code, "detail": exc.message},
        headers=headers,
    )


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: make sure the default categories exist.

    The schema itself is managed by Alembic, not here.
    """
    logger.info(f"Starting {settings.app_name} (api {settings.api_version}, debug={settings.debug})")

    if settings.seed_categories_on_startup:
        with SessionLocal() as db:
            created = catalog.ensure_default_categories(db, settings.default_categories_list)
        logger.info(f"Default categories ready: {len(created)}")

    yield

    logger.info(f"Shutting down {settings.app_name}...")


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## Bookstore API

Catalog, discussions and purchasing for a bookstore.

### Features
- **Categories**: Listing with price, popularity, rating and review orderings
- **Reviews**: Threaded discussions with Like/Dislike reactions
- **Ratings**: One 1-5 star rating per user and book
- **Purchases**: Stock-aware buying with a purchase ledger

### Authentication
Bearer tokens issued by the identity provider; `sub` is the user login.
        """,
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(BookstoreError)
    async def bookstore_exception_handler(
        request: Request,
        exc: BookstoreError,
    ) -> JSONResponse:
        """Return core errors to the client with their typed status."""
        if isinstance(exc, StorageError):
            logger.error(f"Storage error on {request.url.path}: {exc.message}")
        else:
            logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        return error_response(exc)

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """
        Handle database errors raised outside a core operation.

        Logs the actual error while hiding details from users.
        """
        logger.error(f"Database error: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "error": "storage_error",
                "detail": "A database error occurred. Please try again later.",
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Catch-all exception handler.

        In debug mode, show the error text; otherwise hide it.
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)

        if settings.debug:
            return JSONResponse(
                status_code=500,
                content={"detail": str(exc)},
            )

        return JSONResponse(
            status_code=500,
            content={"detail": "An internal error occurred."},
        )

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    api_prefix = f"/api/{settings.api_version}"

    app.include_router(categories_router, prefix=api_prefix)
    # Ratings before books so /books/{id}/rating is matched by its own router
    app.include_router(ratings_router, prefix=api_prefix)
    app.include_router(books_router, prefix=api_prefix)
    app.include_router(reviews_router, prefix=api_prefix)
    # Purchases before users so /users/me/purchases is matched first
    app.include_router(purchases_router, prefix=api_prefix)
    app.include_router(users_router, prefix=api_prefix)
    app.include_router(messages_router, prefix=api_prefix)

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
    )
    def health_check(db: DbSession) -> JSONResponse:
        """Up when the database answers a trivial query."""
        try:
            db.execute(text("SELECT 1"))
            database = "ok"
        except SQLAlchemyError as exc:
            logger.error(f"Health check could not reach the database: {exc}")
            database = "unreachable"

        healthy = database == "ok"
        return JSONResponse(
            status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "healthy" if healthy else "degraded",
                "version": settings.api_version,
                "database": database,
                "rate_limiting": settings.rate_limit_enabled,
            },
        )

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
    )
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn bookstore.main:app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookstore.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
