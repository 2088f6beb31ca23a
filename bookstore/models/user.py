"""
User Model

The core only reads a user's login and role. Credentials live with the
external identity provider; the profile fields are stored as supplied.

Admin and Client are not separate classes: the role is a tag checked
explicitly where a capability gate is needed.
"""

from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Enum as SAEnum
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.database import Base

if TYPE_CHECKING:
    from bookstore.models.purchase import Purchase
    from bookstore.models.review import Review


class UserRole(str, Enum):
    """Capability tag for a user."""
    CLIENT = "Client"
    ADMIN = "Admin"


class User(Base):
    """
    User model.

    Table: users

    Example:
        user = User(
            login="reader",
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.com",
        )
    """

    __tablename__ = "users"

    login: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
        comment="Unique login supplied by the identity provider"
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    avatar_path: Mapped[Optional[str]] = mapped_column(
        String(1000),
        nullable=True,
        comment="Opaque avatar reference"
    )

    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        default=UserRole.CLIENT,
        nullable=False,
    )

    reviews: Mapped[List["Review"]] = relationship(
        "Review",
        back_populates="user",
    )

    purchases: Mapped[List["Purchase"]] = relationship(
        "Purchase",
        back_populates="user",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"User(login='{self.login}', role={self.role.value})"
