import pytest

from boomer.errors import ConflictError, NotFoundError
from boomer.models import Movie
from boomer.repositories.threads import review_threads
from boomer.services import reviews as review_service


def _rating_of(db, movie_id):
    db.expire_all()
    movie = db.get(Movie, movie_id)
    return movie.rating, movie.rating_count


@pytest.mark.parametrize(
    "ratings, expected",
    [
        ([], (0, 0)),
        ([4, 5, 3], (4, 3)),
        ([2, 3], (3, 2)),      # 2.5 → 3
        ([1, 2, 2], (2, 3)),   # 1.67 → 2
        ([5], (5, 1)),
    ],
)
def test_compute_aggregate(ratings, expected):
    reviews = [{"user_id": f"u{i}", "rating": r} for i, r in enumerate(ratings)]
    assert review_service.compute_aggregate(reviews) == expected


def test_missing_rating_counts_as_zero():
    assert review_service.compute_aggregate([{"user_id": "a"}, {"user_id": "b", "rating": 4}]) == (2, 2)


def test_add_reviews_recomputes_movie_rating(db, mongo, make_movie):
    movie = make_movie()
    for i, r in enumerate([4, 5, 3]):
        review_service.add_or_update_review(db, mongo, movie.movie_id, f"user{i}", {"rating": r})

    assert _rating_of(db, movie.movie_id) == (4, 3)


def test_second_review_by_same_user_updates_in_place(db, mongo, make_movie):
    movie = make_movie()
    first = review_service.add_or_update_review(
        db, mongo, movie.movie_id, "alice", {"rating": 2, "comment": "meh", "user_name": "Alice"}
    )
    review_service.add_or_update_review(db, mongo, movie.movie_id, "bob", {"rating": 4})

    updated = review_service.add_or_update_review(db, mongo, movie.movie_id, "alice", {"rating": 5})

    thread = review_service.get_reviews(mongo, movie.movie_id)
    assert len(thread["reviews"]) == 2
    assert updated["rating"] == 5
    # 보내지 않은 필드는 유지
    assert updated["comment"] == "meh"
    assert updated["user_name"] == "Alice"
    assert updated["createdAt"] == first["createdAt"]
    assert updated["updatedAt"] >= first["updatedAt"]
    assert _rating_of(db, movie.movie_id) == (5, 2)  # (5 + 4) / 2 = 4.5 → 5


def test_new_review_defaults_rating_to_zero(db, mongo, make_movie):
    movie = make_movie()
    review = review_service.add_or_update_review(db, mongo, movie.movie_id, "alice", {"comment": "no score"})
    assert review["rating"] == 0
    assert "profile_image" not in review


def test_review_on_unknown_movie_is_not_found(db, mongo):
    with pytest.raises(NotFoundError):
        review_service.add_or_update_review(db, mongo, "nope", "alice", {"rating": 3})


def test_update_requires_existing_review(db, mongo, make_movie):
    movie = make_movie()
    with pytest.raises(NotFoundError):
        review_service.add_or_update_review(
            db, mongo, movie.movie_id, "alice", {"rating": 3}, require_existing=True
        )


def test_deleting_only_review_resets_rating(db, mongo, make_movie):
    movie = make_movie()
    review_service.add_or_update_review(db, mongo, movie.movie_id, "alice", {"rating": 5})
    assert _rating_of(db, movie.movie_id) == (5, 1)

    review_service.delete_review(db, mongo, movie.movie_id, "alice")

    assert _rating_of(db, movie.movie_id) == (0, 0)
    assert review_service.get_reviews(mongo, movie.movie_id)["reviews"] == []


def test_deleting_absent_review_succeeds_unchanged(db, mongo, make_movie):
    movie = make_movie()
    review_service.add_or_update_review(db, mongo, movie.movie_id, "alice", {"rating": 3})

    thread = review_service.delete_review(db, mongo, movie.movie_id, "ghost")

    assert [r["user_id"] for r in thread["reviews"]] == ["alice"]
    assert _rating_of(db, movie.movie_id) == (3, 1)


def test_delete_review_on_unknown_movie_is_not_found(db, mongo):
    with pytest.raises(NotFoundError):
        review_service.delete_review(db, mongo, "nope", "alice")


def test_stale_version_write_is_rejected(db, mongo, make_movie):
    movie = make_movie()
    threads = review_threads(mongo)
    stale = threads.get(movie.movie_id)

    review_service.add_or_update_review(db, mongo, movie.movie_id, "alice", {"rating": 4})

    assert threads.replace_items(movie.movie_id, [], stale["version"]) is None
    assert len(threads.get(movie.movie_id)["reviews"]) == 1


def test_concurrent_review_write_raises_conflict(db, mongo, make_movie, monkeypatch):
    movie = make_movie()
    monkeypatch.setattr(type(review_threads(mongo)), "replace_items", lambda *a, **kw: None)
    with pytest.raises(ConflictError):
        review_service.add_or_update_review(db, mongo, movie.movie_id, "alice", {"rating": 4})


# ------------------------------------------------------------
# HTTP
# ------------------------------------------------------------

def _upload(client, auth, title="Dune"):
    res = client.post("/movies", json={"movie_title": title, "movie_genre": ["sci-fi"]}, headers=auth["headers"])
    assert res.status_code == 200, res.text
    return res.json()["data"]["movie_id"]


def test_review_endpoints_roundtrip(client, auth):
    movie_id = _upload(client, auth)

    res = client.put(
        "/reviews",
        json={"movie_id": movie_id, "user_id": auth["user_id"], "rating": 4, "comment": "good"},
        headers=auth["headers"],
    )
    assert res.status_code == 200
    assert res.json()["data"]["rating"] == 4

    res = client.put(
        "/reviews/update",
        json={"movie_id": movie_id, "user_id": auth["user_id"], "rating": 2},
        headers=auth["headers"],
    )
    assert res.status_code == 200
    assert res.json()["data"]["comment"] == "good"

    res = client.get("/reviews", params={"movie_id": movie_id})
    body = res.json()
    assert body["status"] == 200
    assert len(body["data"]["reviews"]) == 1

    movie = client.get("/movies/by_id", params={"movie_id": movie_id}).json()["data"]
    assert (movie["rating"], movie["rating_count"]) == (2, 1)

    res = client.delete("/reviews/delete", params={"movie_id": movie_id}, headers=auth["headers"])
    assert res.status_code == 200
    movie = client.get("/movies/by_id", params={"movie_id": movie_id}).json()["data"]
    assert (movie["rating"], movie["rating_count"]) == (0, 0)


def test_review_requires_token(client):
    res = client.put("/reviews", json={"movie_id": "x", "user_id": "u", "rating": 3})
    assert res.status_code == 401
    assert res.json()["status"] == 401


def test_reviews_of_unknown_movie_is_404(client):
    res = client.get("/reviews", params={"movie_id": "missing"})
    assert res.status_code == 404
    assert res.json() == {"status": 404, "message": "Review not found", "data": None}


def test_update_missing_review_is_404(client, auth):
    movie_id = _upload(client, auth)
    res = client.put(
        "/reviews/update",
        json={"movie_id": movie_id, "user_id": auth["user_id"], "rating": 2},
        headers=auth["headers"],
    )
    assert res.status_code == 404


def test_invalid_rating_is_400(client, auth):
    movie_id = _upload(client, auth)
    res = client.put(
        "/reviews",
        json={"movie_id": movie_id, "user_id": auth["user_id"], "rating": "lots"},
        headers=auth["headers"],
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid request"
