from pymongo.errors import PyMongoError

from boomer.repositories.threads import review_threads
from boomer.services import reviews as review_service


def _movie(client, auth):
    res = client.post("/movies", json={"movie_title": "Live"}, headers=auth["headers"])
    return res.json()["data"]["movie_id"]


def test_mutation_is_broadcast_to_all_listeners(client, auth):
    movie_id = _movie(client, auth)

    with client.websocket_connect(f"/ws/reviews?token={auth['token']}") as writer, \
            client.websocket_connect("/ws/reviews") as listener:
        writer.send_json({"event": "create", "movie_id": movie_id, "rating": 5, "comment": "wow"})

        for ws in (writer, listener):
            msg = ws.receive_json()
            assert msg["event"] == "reviews"
            assert msg["data"]["movie_id"] == movie_id
            assert [r["rating"] for r in msg["data"]["reviews"]] == [5]
            assert msg["data"]["reviews"][0]["user_id"] == auth["user_id"]

        writer.send_json({"event": "delete", "movie_id": movie_id})
        assert listener.receive_json()["data"]["reviews"] == []
        assert writer.receive_json()["data"]["reviews"] == []

    movie = client.get("/movies/by_id", params={"movie_id": movie_id}).json()["data"]
    assert (movie["rating"], movie["rating_count"]) == (0, 0)


def test_list_answers_only_the_caller(client, auth):
    movie_id = _movie(client, auth)
    with client.websocket_connect("/ws/reviews") as ws:
        ws.send_json({"event": "list", "movie_id": movie_id})
        msg = ws.receive_json()
        assert msg == {"event": "reviews", "data": {**msg["data"], "reviews": []}}


def test_mutation_without_token_is_rejected(client, auth):
    movie_id = _movie(client, auth)
    with client.websocket_connect("/ws/reviews") as ws:
        ws.send_json({"event": "create", "movie_id": movie_id, "rating": 3})
        msg = ws.receive_json()
        assert msg["event"] == "error"
        assert msg["status"] == 401


def test_errors_are_reported_to_caller(client, auth):
    with client.websocket_connect(f"/ws/reviews?token={auth['token']}") as ws:
        ws.send_json({"event": "list", "movie_id": "missing"})
        assert ws.receive_json()["status"] == 404

        ws.send_json({"event": "update", "movie_id": "missing", "rating": 1})
        assert ws.receive_json()["status"] == 404

        ws.send_text("not json")
        assert ws.receive_json()["status"] == 400

        ws.send_json({"event": "shout", "movie_id": "x"})
        assert ws.receive_json()["message"] == "unknown event: shout"


def test_invalid_review_payload_is_rejected_without_writing(client, auth, mongo):
    movie_id = _movie(client, auth)
    with client.websocket_connect(f"/ws/reviews?token={auth['token']}") as ws:
        ws.send_json({"event": "create", "movie_id": movie_id, "rating": "lots"})
        msg = ws.receive_json()
        assert msg["event"] == "error"
        assert msg["status"] == 400
        assert "rating" in msg["message"]

        ws.send_json({"event": "create", "movie_id": movie_id, "rating": 11})
        assert ws.receive_json()["status"] == 400

    assert review_threads(mongo).get(movie_id)["reviews"] == []
    assert client.get("/movies/trending").status_code == 200


def test_storage_failure_is_reported_and_socket_stays_open(client, auth, monkeypatch):
    movie_id = _movie(client, auth)

    def broken(*args, **kwargs):
        raise PyMongoError("connection reset")

    monkeypatch.setattr(review_service, "add_or_update_review", broken)

    with client.websocket_connect(f"/ws/reviews?token={auth['token']}") as ws:
        ws.send_json({"event": "create", "movie_id": movie_id, "rating": 4})
        msg = ws.receive_json()
        assert msg["event"] == "error"
        assert msg["status"] == 500

        ws.send_json({"event": "list", "movie_id": movie_id})
        assert ws.receive_json()["event"] == "reviews"
