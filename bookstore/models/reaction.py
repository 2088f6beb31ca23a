"""
Reaction Model

A user's current Like/Dislike on a review. At most one row per
(user, review): a second reaction replaces the first.
"""

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.database import Base

if TYPE_CHECKING:
    from bookstore.models.review import Review


class ReactionKind(str, Enum):
    LIKE = "Like"
    DISLIKE = "Dislike"


class Reaction(Base):
    """Current reaction of one user to one review."""

    __tablename__ = "reactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_login: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("users.login"),
        nullable=False,
    )
    review_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("reviews.id"),
        nullable=False,
        index=True,
    )
    kind: Mapped[ReactionKind] = mapped_column(
        SAEnum(ReactionKind, name="reaction_kind", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    review: Mapped["Review"] = relationship("Review", back_populates="reactions")

    __table_args__ = (
        UniqueConstraint("user_login", "review_id", name="uq_reaction_user_review"),
    )

    def __repr__(self) -> str:
        return (
            f"<Reaction(user_login={self.user_login!r}, "
            f"review_id={self.review_id}, kind={self.kind.value})>"
        )
