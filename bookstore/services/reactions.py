"""
Reaction Aggregator

Keeps at most one Like/Dislike per (user, review) and the denormalized
likes/dislikes counters on each review.

set_reaction() runs as one transaction:
1. Lock the review row (FOR UPDATE where the engine supports it)
2. Insert the user's reaction or overwrite the existing one
3. Recount Like and Dislike rows and store both counters in a single
   UPDATE of the review row

The counters are always recounted from the reaction rows rather than
incremented, so switching Like -> Dislike moves one vote from one
counter to the other in the same commit.
"""

import logging
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from bookstore.exceptions import ConflictError, NotFoundError
from bookstore.models import Reaction, ReactionKind, Review
from bookstore.services.common import atomic
from bookstore.services.reviews import get_review
from bookstore.services.users import get_user

logger = logging.getLogger(__name__)

UPSERT_ATTEMPTS = 2


def set_reaction(
    db: Session,
    user_login: str,
    review_id: int,
    kind: ReactionKind,
) -> Review:
    """
    Record the user's reaction to a review, replacing any previous one.

    Returns:
        The review with refreshed like/dislike counters

    Raises:
        NotFoundError: unknown user or review
        ConflictError: the upsert kept losing a concurrent race
    """
    kind = ReactionKind(kind)
    get_user(db, user_login)
    get_review(db, review_id)

    attempt = 1
    while True:
        try:
            review = _apply_reaction(db, user_login, review_id, kind)
            break
        except ConflictError:
            if attempt >= UPSERT_ATTEMPTS:
                raise
            logger.warning(
                f"set_reaction: concurrent insert for ({user_login}, {review_id}), retrying"
            )
            attempt += 1

    logger.info(
        f"{user_login} reacted {kind.value} to review {review_id} "
        f"(likes={review.likes}, dislikes={review.dislikes})"
    )
    return review


def _apply_reaction(
    db: Session,
    user_login: str,
    review_id: int,
    kind: ReactionKind,
) -> Review:
    with atomic(db, "set_reaction"):
        review = db.execute(
            select(Review).where(Review.id == review_id).with_for_update()
        ).scalar_one_or_none()
        if review is None:
            raise NotFoundError("Review", review_id)

        reaction = db.execute(
            select(Reaction).where(
                Reaction.user_login == user_login,
                Reaction.review_id == review_id,
            )
        ).scalar_one_or_none()

        if reaction is None:
            db.add(Reaction(user_login=user_login, review_id=review_id, kind=kind))
        else:
            reaction.kind = kind
        db.flush()

        # One statement, so the recount runs under the write lock even on
        # engines that ignore FOR UPDATE
        db.execute(
            update(Review)
            .where(Review.id == review_id)
            .values(likes=_count_of(review_id, ReactionKind.LIKE),
                    dislikes=_count_of(review_id, ReactionKind.DISLIKE))
            .execution_options(synchronize_session=False)
        )

    db.refresh(review)
    return review


def _count_of(review_id: int, kind: ReactionKind):
    return (
        select(func.count(Reaction.id))
        .where(Reaction.review_id == review_id, Reaction.kind == kind)
        .scalar_subquery()
    )


def count_reactions(db: Session, review_id: int) -> tuple[int, int]:
    """Live (likes, dislikes) for a review, from the reaction rows."""
    stmt = (
        select(Reaction.kind, func.count(Reaction.id))
        .where(Reaction.review_id == review_id)
        .group_by(Reaction.kind)
    )
    counts = {kind: count for kind, count in db.execute(stmt).all()}
    return counts.get(ReactionKind.LIKE, 0), counts.get(ReactionKind.DISLIKE, 0)


def get_user_reaction(
    db: Session,
    user_login: str,
    review_id: int,
) -> Optional[ReactionKind]:
    """The user's current reaction to a review, or None."""
    stmt = select(Reaction.kind).where(
        Reaction.user_login == user_login,
        Reaction.review_id == review_id,
    )
    return db.execute(stmt).scalar_one_or_none()
