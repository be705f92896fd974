"""
End-to-end walk through registration, reviewing, aggregation and likes.
"""
from datetime import datetime, timedelta, timezone
from imapi.core.security import verify_access_token


def test_review_lifecycle(client, register_and_login):
    response = client.post(
        "/api/users/register",
        json={
            "first_name": "Alice",
            "last_name": "Liddell",
            "username": "alice",
            "password": "longenoughpassword"
        }
    )
    assert response.status_code == 201

    response = client.post(
        "/api/users/login",
        json={"username": "alice", "password": "longenoughpassword"}
    )
    assert response.status_code == 200
    token = response.json()["access_token"]
    claims = verify_access_token(token)
    assert claims.expires_at - datetime.now(timezone.utc) <= timedelta(hours=1)
    alice = {"Authorization": f"Bearer {token}"}

    review_text = "x" * 50
    response = client.post(
        "/api/reviews/me",
        json={"tmdb_movie_id": "603", "title": "Great", "review_text": review_text, "rating": 8},
        headers=alice
    )
    assert response.status_code == 201
    review_id = response.json()["id"]

    movie = client.get("/api/movies/603").json()
    assert movie["title"] == "The Matrix"
    assert movie["review_count"] == 1
    assert movie["average_rating"] == 8.0

    bob = register_and_login("bob")
    carol = register_and_login("carol")
    client.post(f"/api/reviews/{review_id}/like", headers=bob)
    client.post(f"/api/reviews/{review_id}/like", headers=carol)
    assert client.get(f"/api/reviews/{review_id}").json()["likes"] == 2

    assert client.delete(f"/api/reviews/{review_id}/me", headers=alice).status_code == 204
    response = client.get(f"/api/reviews/{review_id}")
    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"

    movie = client.get("/api/movies/603").json()
    assert movie["review_count"] == 0
    assert movie["average_rating"] is None
