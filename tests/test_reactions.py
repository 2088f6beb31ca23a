"""
Tests for Like/Dislike reactions and the review counters.
"""

import pytest
from sqlalchemy import func, select

from bookstore.exceptions import NotFoundError
from bookstore.models import Reaction, ReactionKind
from bookstore.services import reactions, reviews


@pytest.fixture
def sample_review(db_session, sample_book, sample_user):
    return reviews.add_review(db_session, sample_book.id, sample_user.login, "Worth it")


def reaction_rows(db_session, review_id: int) -> int:
    stmt = select(func.count(Reaction.id)).where(Reaction.review_id == review_id)
    return db_session.execute(stmt).scalar()


class TestSetReaction:
    """Tests for set_reaction()."""

    def test_like(self, db_session, sample_review, second_user):
        review = reactions.set_reaction(
            db_session, second_user.login, sample_review.id, ReactionKind.LIKE
        )
        assert (review.likes, review.dislikes) == (1, 0)

    def test_same_reaction_twice_counts_once(self, db_session, sample_review, second_user):
        reactions.set_reaction(db_session, second_user.login, sample_review.id, ReactionKind.LIKE)
        review = reactions.set_reaction(
            db_session, second_user.login, sample_review.id, ReactionKind.LIKE
        )
        assert (review.likes, review.dislikes) == (1, 0)
        assert reaction_rows(db_session, sample_review.id) == 1

    def test_switch_like_to_dislike(self, db_session, sample_review, second_user):
        reactions.set_reaction(db_session, second_user.login, sample_review.id, ReactionKind.LIKE)
        review = reactions.set_reaction(
            db_session, second_user.login, sample_review.id, ReactionKind.DISLIKE
        )

        assert (review.likes, review.dislikes) == (0, 1)
        assert reaction_rows(db_session, sample_review.id) == 1
        assert (
            reactions.get_user_reaction(db_session, second_user.login, sample_review.id)
            is ReactionKind.DISLIKE
        )

    def test_counters_match_rows(self, db_session, sample_review, make_users):
        voters = make_users(5)
        for voter in voters[:3]:
            reactions.set_reaction(db_session, voter.login, sample_review.id, ReactionKind.LIKE)
        for voter in voters[3:]:
            reactions.set_reaction(db_session, voter.login, sample_review.id, ReactionKind.DISLIKE)
        reactions.set_reaction(db_session, voters[0].login, sample_review.id, ReactionKind.DISLIKE)

        review = reviews.get_review(db_session, sample_review.id)
        assert (review.likes, review.dislikes) == (2, 3)
        assert reactions.count_reactions(db_session, sample_review.id) == (2, 3)

    def test_accepts_string_kind(self, db_session, sample_review, second_user):
        review = reactions.set_reaction(db_session, second_user.login, sample_review.id, "Dislike")
        assert review.dislikes == 1

    def test_unknown_review(self, db_session, second_user):
        with pytest.raises(NotFoundError):
            reactions.set_reaction(db_session, second_user.login, 999, ReactionKind.LIKE)

    def test_unknown_user(self, db_session, sample_review):
        with pytest.raises(NotFoundError):
            reactions.set_reaction(db_session, "ghost", sample_review.id, ReactionKind.LIKE)
        assert reaction_rows(db_session, sample_review.id) == 0

    def test_no_reaction(self, db_session, sample_review, second_user):
        assert reactions.get_user_reaction(db_session, second_user.login, sample_review.id) is None


class TestReactionsAPI:
    """Tests for the reaction endpoints."""

    def test_put_reaction(self, client, sample_review, second_user, auth_header):
        response = client.put(
            f"/api/v1/reviews/{sample_review.id}/reaction",
            json={"kind": "Like"},
            headers=auth_header(second_user),
        )
        assert response.status_code == 200
        assert response.json() == {
            "review_id": sample_review.id,
            "kind": "Like",
            "likes": 1,
            "dislikes": 0,
        }

    def test_switch_reaction(self, client, sample_review, second_user, auth_header):
        headers = auth_header(second_user)
        client.put(f"/api/v1/reviews/{sample_review.id}/reaction", json={"kind": "Like"}, headers=headers)
        response = client.put(
            f"/api/v1/reviews/{sample_review.id}/reaction",
            json={"kind": "Dislike"},
            headers=headers,
        )
        data = response.json()
        assert (data["likes"], data["dislikes"]) == (0, 1)

    def test_invalid_kind(self, client, sample_review, second_user, auth_header):
        response = client.put(
            f"/api/v1/reviews/{sample_review.id}/reaction",
            json={"kind": "Love"},
            headers=auth_header(second_user),
        )
        assert response.status_code == 422

    def test_get_my_reaction(self, client, sample_review, second_user, auth_header):
        response = client.get(
            f"/api/v1/reviews/{sample_review.id}/reaction",
            headers=auth_header(second_user),
        )
        assert response.status_code == 200
        assert response.json()["kind"] is None

    def test_requires_auth(self, client, sample_review):
        response = client.put(f"/api/v1/reviews/{sample_review.id}/reaction", json={"kind": "Like"})
        assert response.status_code == 401


class TestConcurrentReactions:
    """Simultaneous reactions keep one row per user and exact counters."""

    def test_same_and_different_users(self, file_sessions, file_catalog, run_in_threads):
        review_id = file_catalog["review_id"]
        calls = [
            ("u1", ReactionKind.LIKE),
            ("u1", ReactionKind.DISLIKE),
            ("u1", ReactionKind.LIKE),
            ("u1", ReactionKind.DISLIKE),
            ("u2", ReactionKind.LIKE),
            ("u2", ReactionKind.LIKE),
            ("u3", ReactionKind.DISLIKE),
            ("u0", ReactionKind.LIKE),
        ]

        def react(login: str, kind: ReactionKind):
            with file_sessions() as db:
                review = reactions.set_reaction(db, login, review_id, kind)
                return review.likes, review.dislikes

        outcomes = run_in_threads([lambda c=c: react(*c) for c in calls])

        assert [o for o in outcomes if isinstance(o, Exception)] == []
        with file_sessions() as db:
            assert reaction_rows(db, review_id) == 4
            per_user = db.execute(
                select(Reaction.user_login, func.count(Reaction.id))
                .where(Reaction.review_id == review_id)
                .group_by(Reaction.user_login)
            ).all()
            assert all(count == 1 for _, count in per_user)

            review = reviews.get_review(db, review_id)
            likes, dislikes = reactions.count_reactions(db, review_id)
            assert (review.likes, review.dislikes) == (likes, dislikes)
            assert likes + dislikes == 4
            assert reactions.get_user_reaction(db, "u2", review_id) is ReactionKind.LIKE
            assert reactions.get_user_reaction(db, "u3", review_id) is ReactionKind.DISLIKE
