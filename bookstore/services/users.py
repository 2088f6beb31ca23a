"""
User Records

The registration flow and credential storage belong to the external
identity provider. It calls register_user() with already-validated
values; the core only keeps the login, profile fields and role.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookstore.exceptions import ConflictError
from bookstore.models import User, UserRole
from bookstore.services.common import atomic, get_or_raise

logger = logging.getLogger(__name__)


def get_user(db: Session, login: str) -> User:
    """
    Load a user by login.

    Raises:
        NotFoundError: if no user has this login
    """
    return get_or_raise(db, User, login, "User")


def register_user(
    db: Session,
    login: str,
    first_name: str,
    last_name: str,
    email: str,
    avatar_path: Optional[str] = None,
    role: UserRole = UserRole.CLIENT,
) -> User:
    """
    Store a new user record.

    Raises:
        ConflictError: if the login is already taken
    """
    if db.get(User, login) is not None:
        raise ConflictError(f"User {login!r} already exists")

    user = User(
        login=login,
        first_name=first_name,
        last_name=last_name,
        email=email,
        avatar_path=avatar_path,
        role=role,
    )
    with atomic(db, "register_user"):
        db.add(user)

    db.refresh(user)
    logger.info(f"Registered user {login} with role {role.value}")
    return user


def set_user_role(db: Session, login: str, role: UserRole) -> User:
    """Change a user's role."""
    user = get_user(db, login)
    with atomic(db, "set_user_role"):
        user.role = role

    db.refresh(user)
    logger.info(f"Updated role for {login} to {role.value}")
    return user


def list_users(db: Session) -> list[User]:
    stmt = select(User).order_by(User.login)
    return list(db.execute(stmt).scalars().all())


def ensure_admin(
    db: Session,
    login: str,
    first_name: str = "Admin",
    last_name: str = "User",
    email: str = "admin@example.com",
) -> User:
    """
    Make sure an admin account exists, creating or promoting it.

    Used by the seed script on a fresh database.
    """
    user = db.get(User, login)
    if user is None:
        return register_user(
            db,
            login=login,
            first_name=first_name,
            last_name=last_name,
            email=email,
            role=UserRole.ADMIN,
        )
    if not user.is_admin:
        return set_user_role(db, login, UserRole.ADMIN)
    return user
