"""
Tests for posting reviews and rebuilding discussion threads.
"""

import pytest

from bookstore.exceptions import InvalidParentError, NotFoundError
from bookstore.models import Review
from bookstore.services import reviews
from bookstore.services.reviews import assemble_forest


def shape(nodes) -> list:
    """(id, [children...]) tuples for easy comparison."""
    return [(node.id, shape(node.replies)) for node in nodes]


class TestAddReview:
    """Tests for add_review()."""

    def test_add_root_review(self, db_session, sample_book, sample_user):
        review = reviews.add_review(db_session, sample_book.id, sample_user.login, "Loved it")

        assert review.id is not None
        assert review.parent_id is None
        assert review.likes == 0
        assert review.dislikes == 0

    def test_add_reply(self, db_session, sample_book, sample_user, second_user):
        root = reviews.add_review(db_session, sample_book.id, sample_user.login, "Loved it")
        reply = reviews.add_review(
            db_session, sample_book.id, second_user.login, "Me too", parent_id=root.id
        )
        assert reply.parent_id == root.id

    def test_unknown_book(self, db_session, sample_user):
        with pytest.raises(NotFoundError):
            reviews.add_review(db_session, 999, sample_user.login, "?")

    def test_unknown_author(self, db_session, sample_book):
        with pytest.raises(NotFoundError):
            reviews.add_review(db_session, sample_book.id, "ghost", "?")

    def test_missing_parent(self, db_session, sample_book, sample_user):
        with pytest.raises(InvalidParentError):
            reviews.add_review(db_session, sample_book.id, sample_user.login, "?", parent_id=999)
        assert reviews.count_reviews(db_session, sample_book.id) == 0

    def test_parent_on_another_book(self, db_session, make_book, sample_user):
        first = make_book("First")
        second = make_book("Second")
        other = reviews.add_review(db_session, first.id, sample_user.login, "on first")

        with pytest.raises(InvalidParentError):
            reviews.add_review(
                db_session, second.id, sample_user.login, "wrong book", parent_id=other.id
            )
        assert reviews.count_reviews(db_session, second.id) == 0

    def test_parent_inside_a_cycle(self, db_session, sample_book, sample_user):
        a = reviews.add_review(db_session, sample_book.id, sample_user.login, "a")
        b = reviews.add_review(db_session, sample_book.id, sample_user.login, "b", parent_id=a.id)
        # Corrupt the data behind the service's back
        a.parent_id = b.id
        db_session.commit()

        with pytest.raises(InvalidParentError):
            reviews.add_review(db_session, sample_book.id, sample_user.login, "c", parent_id=b.id)
        assert reviews.count_reviews(db_session, sample_book.id) == 2


class TestBuildThread:
    """Tests for build_thread()."""

    def test_empty_thread(self, db_session, sample_book):
        assert reviews.build_thread(db_session, sample_book.id) == []

    def test_unknown_book(self, db_session):
        with pytest.raises(NotFoundError):
            reviews.build_thread(db_session, 999)

    def test_nested_chain(self, db_session, sample_book, sample_user):
        a = reviews.add_review(db_session, sample_book.id, sample_user.login, "A")
        b = reviews.add_review(db_session, sample_book.id, sample_user.login, "B", parent_id=a.id)
        c = reviews.add_review(db_session, sample_book.id, sample_user.login, "C", parent_id=b.id)

        roots = reviews.build_thread(db_session, sample_book.id)
        assert shape(roots) == [(a.id, [(b.id, [(c.id, [])])])]

    def test_siblings_ordered_by_id(self, db_session, sample_book, sample_user):
        root = reviews.add_review(db_session, sample_book.id, sample_user.login, "root")
        first = reviews.add_review(db_session, sample_book.id, sample_user.login, "1", parent_id=root.id)
        other_root = reviews.add_review(db_session, sample_book.id, sample_user.login, "root 2")
        second = reviews.add_review(db_session, sample_book.id, sample_user.login, "2", parent_id=root.id)

        roots = reviews.build_thread(db_session, sample_book.id)
        assert shape(roots) == [
            (root.id, [(first.id, []), (second.id, [])]),
            (other_root.id, []),
        ]

    def test_dangling_parent_becomes_root(self, db_session, sample_book, sample_user):
        kept = reviews.add_review(db_session, sample_book.id, sample_user.login, "kept")
        orphan = Review(
            book_id=sample_book.id,
            user_login=sample_user.login,
            text="parent was deleted",
            parent_id=999,
        )
        db_session.add(orphan)
        db_session.commit()

        roots = reviews.build_thread(db_session, sample_book.id)
        assert shape(roots) == [(kept.id, []), (orphan.id, [])]

    def test_every_review_appears_once(self, db_session, sample_book, sample_user):
        root = reviews.add_review(db_session, sample_book.id, sample_user.login, "root")
        parent = root
        for i in range(20):
            parent = reviews.add_review(
                db_session, sample_book.id, sample_user.login, str(i), parent_id=parent.id
            )

        roots = reviews.build_thread(db_session, sample_book.id)
        ids = [node.id for r in roots for node in r.walk()]
        assert len(ids) == 21
        assert len(set(ids)) == 21


class TestAssembleForest:
    """Tests for assemble_forest() on raw rows, including corrupted ones."""

    @staticmethod
    def row(review_id: int, parent_id=None) -> Review:
        return Review(id=review_id, book_id=1, user_login="x", text="t", parent_id=parent_id)

    def test_loop_is_broken_at_lowest_id(self):
        rows = [self.row(1, parent_id=2), self.row(2, parent_id=1), self.row(3)]

        roots = assemble_forest(rows)
        assert shape(roots) == [(1, [(2, [])]), (3, [])]

    def test_self_parent_is_root(self):
        roots = assemble_forest([self.row(1, parent_id=1)])
        assert shape(roots) == [(1, [])]


class TestReviewsAPI:
    """Tests for the review endpoints."""

    def test_post_review(self, client, sample_book, sample_user, auth_header):
        response = client.post(
            f"/api/v1/books/{sample_book.id}/reviews",
            json={"text": "Great read"},
            headers=auth_header(sample_user),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["user_login"] == sample_user.login
        assert data["parent_id"] is None

    def test_post_review_requires_auth(self, client, sample_book):
        response = client.post(f"/api/v1/books/{sample_book.id}/reviews", json={"text": "Hi"})
        assert response.status_code == 401

    def test_post_reply_with_bad_parent(self, client, sample_book, sample_user, auth_header):
        response = client.post(
            f"/api/v1/books/{sample_book.id}/reviews",
            json={"text": "reply", "parent_id": 999},
            headers=auth_header(sample_user),
        )
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_parent"

    def test_get_thread(self, client, db_session, sample_book, sample_user):
        a = reviews.add_review(db_session, sample_book.id, sample_user.login, "A")
        b = reviews.add_review(db_session, sample_book.id, sample_user.login, "B", parent_id=a.id)
        reviews.add_review(db_session, sample_book.id, sample_user.login, "C", parent_id=b.id)

        response = client.get(f"/api/v1/books/{sample_book.id}/reviews")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert len(data["items"]) == 1
        child = data["items"][0]["replies"][0]
        assert child["text"] == "B"
        assert child["replies"][0]["text"] == "C"
        assert child["replies"][0]["replies"] == []

    def test_get_thread_unknown_book(self, client):
        response = client.get("/api/v1/books/999/reviews")
        assert response.status_code == 404

    def test_get_single_review(self, client, db_session, sample_book, sample_user):
        review = reviews.add_review(db_session, sample_book.id, sample_user.login, "A")

        response = client.get(f"/api/v1/reviews/{review.id}")
        assert response.status_code == 200
        assert response.json()["text"] == "A"
