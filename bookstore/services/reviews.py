"""
Review Tree Builder

Reviews are stored flat, each with an optional parent_id pointing at
another review of the same book. build_thread() turns the rows of one
book into a forest in a single query:

1. Load every review of the book ordered by id
2. Index the nodes by id
3. Attach each node to its parent's replies, or to the roots when it has
   no parent or its parent is missing (a "dangling parent")

Nesting depth is whatever the data holds; the builder never recurses.
add_review() validates the parent at write time (exists, same book, no
cycle), so the stored rows always describe a tree.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookstore.exceptions import InvalidParentError
from bookstore.models import Book, Review
from bookstore.services.common import atomic, get_or_raise
from bookstore.services.users import get_user

logger = logging.getLogger(__name__)


@dataclass
class ReviewNode:
    """A review with its replies, ordered by review id."""

    review: Review
    replies: list["ReviewNode"] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.review.id

    def walk(self):
        """Yield this node and every descendant, depth first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.replies))


def get_review(db: Session, review_id: int) -> Review:
    """
    Raises:
        NotFoundError: if the review does not exist
    """
    return get_or_raise(db, Review, review_id, "Review")


def _load_reviews(db: Session, book_id: int) -> list[Review]:
    stmt = select(Review).where(Review.book_id == book_id).order_by(Review.id)
    return list(db.execute(stmt).scalars().all())


def _validate_parent(db: Session, book_id: int, parent_id: int) -> None:
    """
    Check that parent_id can receive a reply on book_id.

    Raises:
        InvalidParentError: parent missing, on another book, or part of a cycle
    """
    parent = db.get(Review, parent_id)
    if parent is None:
        raise InvalidParentError(f"Parent review {parent_id} does not exist")
    if parent.book_id != book_id:
        raise InvalidParentError(
            f"Parent review {parent_id} belongs to book {parent.book_id}, not {book_id}"
        )

    # Walk up from the parent; meeting a review twice means the ancestry
    # loops and the new review could never be placed in a tree.
    parents = {
        row.id: row.parent_id
        for row in db.execute(
            select(Review.id, Review.parent_id).where(Review.book_id == book_id)
        )
    }
    seen: set[int] = set()
    current: Optional[int] = parent_id
    while current is not None and current in parents:
        if current in seen:
            raise InvalidParentError(
                f"Replying to review {parent_id} would create a cycle"
            )
        seen.add(current)
        current = parents[current]


def add_review(
    db: Session,
    book_id: int,
    author_login: str,
    text: str,
    parent_id: Optional[int] = None,
) -> Review:
    """
    Post a review, or a reply when parent_id is given.

    All checks run before anything is written.

    Raises:
        NotFoundError: unknown book or author
        InvalidParentError: parent missing, on another book, or cyclic
    """
    get_or_raise(db, Book, book_id, "Book")
    get_user(db, author_login)
    if parent_id is not None:
        _validate_parent(db, book_id, parent_id)

    review = Review(
        book_id=book_id,
        user_login=author_login,
        text=text,
        parent_id=parent_id,
        likes=0,
        dislikes=0,
    )
    with atomic(db, "add_review"):
        db.add(review)

    db.refresh(review)
    if parent_id is None:
        logger.info(f"Review {review.id} added to book {book_id} by {author_login}")
    else:
        logger.info(
            f"Reply {review.id} to review {parent_id} added on book {book_id} by {author_login}"
        )
    return review


def build_thread(db: Session, book_id: int) -> list[ReviewNode]:
    """
    Rebuild the discussion forest of a book.

    Raises:
        NotFoundError: unknown book
    """
    get_or_raise(db, Book, book_id, "Book")
    return assemble_forest(_load_reviews(db, book_id))


def assemble_forest(reviews: list[Review]) -> list[ReviewNode]:
    """
    Arrange flat review rows into a forest.

    Rows must be sorted by id. Replies whose parent isn't among the rows
    become roots. If corrupted data ever links reviews in a loop, the
    lowest id of each loop is promoted to a root so nothing is dropped.
    """
    nodes = {review.id: ReviewNode(review) for review in reviews}
    roots: list[ReviewNode] = []

    for review in reviews:
        node = nodes[review.id]
        parent = nodes.get(review.parent_id) if review.parent_id is not None else None
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.replies.append(node)

    reached = {n.id for root in roots for n in root.walk()}
    if len(reached) < len(nodes):
        for review in reviews:
            if review.id in reached:
                continue
            node = nodes[review.id]
            nodes[review.parent_id].replies.remove(node)
            roots.append(node)
            reached.update(n.id for n in node.walk())
            logger.warning(f"Review {review.id} is part of a parent cycle; shown as a root")
        roots.sort(key=lambda n: n.id)

    return roots


def count_reviews(db: Session, book_id: int) -> int:
    """Number of reviews on a book, replies included."""
    stmt = select(func.count(Review.id)).where(Review.book_id == book_id)
    return db.execute(stmt).scalar() or 0
