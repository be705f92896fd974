"""
Tests for the like ledger and like endpoints.
"""
import pytest
from imapi.core.errors import NotFoundError
from imapi.models.review import ReviewLike
from imapi.schemas.review import ReviewCreate
from imapi.services.like_ledger import LikeLedger
from imapi.services.review_store import ReviewStore


@pytest.fixture
def review_id(db, make_user, review_payload):
    return ReviewStore(db).create(make_user("alice"), ReviewCreate(**review_payload))


def test_like_is_idempotent(db, make_user, review_id):
    bob = make_user("bob")
    ledger = LikeLedger(db)

    ledger.like(review_id, bob)
    ledger.like(review_id, bob)

    assert ledger.count_likes(review_id) == 1
    assert db.query(ReviewLike).count() == 1
    assert ledger.has_liked(review_id, bob)


def test_unlike_absent_pair_is_noop(db, make_user, review_id):
    bob = make_user("bob")
    ledger = LikeLedger(db)

    ledger.unlike(review_id, bob)

    assert ledger.count_likes(review_id) == 0
    assert db.query(ReviewLike).count() == 0


def test_unlike_removes_like(db, make_user, review_id):
    bob = make_user("bob")
    ledger = LikeLedger(db)
    ledger.like(review_id, bob)

    ledger.unlike(review_id, bob)
    ledger.unlike(review_id, bob)

    assert ledger.count_likes(review_id) == 0
    assert not ledger.has_liked(review_id, bob)


def test_likes_from_different_users_add_up(db, make_user, review_id):
    ledger = LikeLedger(db)
    ledger.like(review_id, make_user("bob"))
    ledger.like(review_id, make_user("carol"))

    assert ledger.count_likes(review_id) == 2


def test_author_may_like_own_review(db, review_id):
    ledger = LikeLedger(db)
    alice = ReviewStore(db).get_owner_id(review_id)

    ledger.like(review_id, alice)

    assert ledger.count_likes(review_id) == 1


def test_like_missing_review(db, make_user):
    with pytest.raises(NotFoundError):
        LikeLedger(db).like(999, make_user("bob"))


def test_like_by_unknown_user(db, review_id):
    ledger = LikeLedger(db)

    with pytest.raises(NotFoundError):
        ledger.like(review_id, 9999)
    assert ledger.count_likes(review_id) == 0


def test_count_likes_reflects_latest_state(db, make_user, review_id):
    bob = make_user("bob")
    ledger = LikeLedger(db)
    assert ledger.count_likes(review_id) == 0
    ledger.like(review_id, bob)
    assert ledger.count_likes(review_id) == 1
    ledger.unlike(review_id, bob)
    assert ledger.count_likes(review_id) == 0


def test_concurrent_duplicate_like_is_absorbed(session_factory, make_user, review_id):
    """A second session inserting the same pair after the check still ends with one row."""
    bob = make_user("bob")
    first = session_factory()
    second = session_factory()
    try:
        LikeLedger(first).like(review_id, bob)

        ledger = LikeLedger(second)
        real_has_liked = ledger.has_liked
        checks = []

        def stale_has_liked(review_id, user_id):
            # The first check runs before the other session's insert is visible
            checks.append(review_id)
            if len(checks) == 1:
                return False
            return real_has_liked(review_id, user_id)

        ledger.has_liked = stale_has_liked
        ledger.like(review_id, bob)
        assert len(checks) == 2
    finally:
        first.close()
        second.close()

    check = session_factory()
    try:
        assert LikeLedger(check).count_likes(review_id) == 1
    finally:
        check.close()


# API

def test_like_endpoints(client, register_and_login, review_payload):
    alice = register_and_login("alice")
    bob = register_and_login("bob")
    review_id = client.post("/api/reviews/me", json=review_payload, headers=alice).json()["id"]

    assert client.post(f"/api/reviews/{review_id}/like", headers=bob).status_code == 201
    assert client.post(f"/api/reviews/{review_id}/like", headers=bob).status_code == 201
    assert client.get(f"/api/reviews/{review_id}").json()["likes"] == 1

    assert client.delete(f"/api/reviews/{review_id}/like", headers=bob).status_code == 204
    assert client.delete(f"/api/reviews/{review_id}/like", headers=bob).status_code == 204
    assert client.get(f"/api/reviews/{review_id}").json()["likes"] == 0


def test_like_requires_token(client, register_and_login, review_payload):
    alice = register_and_login("alice")
    review_id = client.post("/api/reviews/me", json=review_payload, headers=alice).json()["id"]

    assert client.post(f"/api/reviews/{review_id}/like").status_code == 401


def test_like_missing_review_api(client, register_and_login):
    headers = register_and_login("bob")
    assert client.post("/api/reviews/999/like", headers=headers).status_code == 404


def test_like_with_token_of_unknown_user(client, register_and_login, review_payload, credentials):
    alice = register_and_login("alice")
    review_id = client.post("/api/reviews/me", json=review_payload, headers=alice).json()["id"]
    ghost = {"Authorization": f"Bearer {credentials.issue_token(9999)}"}

    response = client.post(f"/api/reviews/{review_id}/like", headers=ghost)

    assert response.status_code == 401
    assert response.json()["kind"] == "auth"
    assert client.get(f"/api/reviews/{review_id}").json()["likes"] == 0
