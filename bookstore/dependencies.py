"""
FastAPI Dependencies Module

Reusable dependencies injected into route handlers:
- DbSession: one SQLAlchemy session per request
- CurrentUser: the user named by the identity provider's bearer token
- AdminUser: CurrentUser gated on the Admin role
- SortMode: the listing order query parameter
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from bookstore.database import get_db
from bookstore.models.user import User
from bookstore.services.catalog import BookSortMode
from bookstore.services.security import login_from_token

# Instead of writing:
#   def get_book(db: Session = Depends(get_db)):
# routes write:
#   def get_book(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Listing Parameters
# =============================================================================
def get_sort_mode(
    sort: BookSortMode = Query(
        default=BookSortMode.DEFAULT,
        description="Listing order",
        examples=["price_asc", "popularity_desc"],
    ),
) -> BookSortMode:
    return sort


SortMode = Annotated[BookSortMode, Depends(get_sort_mode)]


# =============================================================================
# Identity Boundary
# =============================================================================
# The identity provider issues the bearer token; tokenUrl only feeds the
# Swagger "Authorize" button.

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/v1/auth/token",
    auto_error=True,
)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the bearer token to a stored user.

    Raises:
        HTTPException: 401 if the token is invalid or the login is unknown
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    login = login_from_token(token)
    if login is None:
        raise credentials_exception

    user = db.get(User, login)
    if user is None:
        raise credentials_exception

    return user


def get_current_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Capability gate for catalog administration.

    Raises:
        HTTPException: 403 if the user is not an Admin
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user


CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(get_current_admin)]
