from boomer.repositories.threads import comment_threads, review_threads


def _upload(client, auth, **fields):
    payload = {"movie_title": "Inception", "movie_genre": ["action", "sci-fi"], "type": "movie", **fields}
    res = client.post("/movies", json=payload, headers=auth["headers"])
    assert res.status_code == 200, res.text
    return res.json()["data"]


def test_upload_creates_threads_and_links(client, auth, mongo):
    movie = _upload(client, auth, download_links=["https://dl/1", "https://dl/2"], age_rating="pg13")

    assert movie["rating"] == 0
    assert movie["rating_count"] == 0
    assert movie["poster_id"] == auth["user_id"]
    assert movie["age_rating"] == "pg13"
    assert comment_threads(mongo).get(movie["movie_id"])["comments"] == []
    assert review_threads(mongo).get(movie["movie_id"])["reviews"] == []

    links = client.get("/movies/download_links", params={"movie_id": movie["movie_id"]}).json()["data"]
    assert sorted(link["url"] for link in links) == ["https://dl/1", "https://dl/2"]
    assert all(link["rating"] == 0 and link["rated_by"] == [] for link in links)


def test_movie_ids_are_unique(client, auth):
    ids = {_upload(client, auth)["movie_id"] for _ in range(5)}
    assert len(ids) == 5


def test_upload_requires_auth_and_title(client, auth):
    assert client.post("/movies", json={"movie_title": "x"}).status_code == 401
    res = client.post("/movies", json={"synopsis": "no title"}, headers=auth["headers"])
    assert res.status_code == 400


def test_list_and_lookup(client, auth):
    movie = _upload(client, auth)

    body = client.get("/movies").json()
    assert body["status"] == 200
    assert [m["movie_id"] for m in body["data"]] == [movie["movie_id"]]

    assert client.get("/movies/by_id", params={"movie_id": movie["movie_id"]}).json()["data"]["movie_title"] == "Inception"
    res = client.get("/movies/by_id", params={"movie_id": "missing"})
    assert res.status_code == 404
    assert res.json()["message"] == "Movie not found"


def test_genre_type_and_search(client, auth):
    a = _upload(client, auth, movie_title="The Matrix", movie_genre=["Sci-Fi"], type="movie")
    b = _upload(client, auth, movie_title="Friends", movie_genre=["comedy"], type="series")

    genre = client.post("/movies/genre", json={"movie_genre": ["sci-fi", "drama"]}).json()["data"]
    assert [m["movie_id"] for m in genre] == [a["movie_id"]]
    assert client.post("/movies/genre", json={"movie_genre": ["horror"]}).json()["data"] == []

    series = client.get("/movies/type", params={"type": "series"}).json()["data"]
    assert [m["movie_id"] for m in series] == [b["movie_id"]]

    found = client.post("/movies/search", json={"movie_title": "matr"}).json()["data"]
    assert [m["movie_id"] for m in found] == [a["movie_id"]]
    found = client.get("/movies/search", params={"movie_title": "FRIEND"}).json()["data"]
    assert [m["movie_id"] for m in found] == [b["movie_id"]]
    assert client.get("/movies/search").json()["data"] == []


def test_partial_update(client, auth):
    movie = _upload(client, auth, synopsis="dreams", tags=["mind"])

    res = client.put(
        "/movies/update",
        json={"movie_id": movie["movie_id"], "synopsis": "dreams within dreams", "tags": None},
        headers=auth["headers"],
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["synopsis"] == "dreams within dreams"
    assert data["tags"] == []
    assert data["movie_title"] == "Inception"
    assert data["movie_genre"] == ["action", "sci-fi"]

    res = client.put("/movies/update", json={"movie_id": "missing", "synopsis": "x"}, headers=auth["headers"])
    assert res.status_code == 404


def test_rating_is_not_client_writable(client, auth):
    movie = _upload(client, auth)
    client.put("/movies/update", json={"movie_id": movie["movie_id"], "rating": 5}, headers=auth["headers"])
    assert client.get("/movies/by_id", params={"movie_id": movie["movie_id"]}).json()["data"]["rating"] == 0


def test_delete_cascades(client, auth, mongo):
    movie = _upload(client, auth, download_links=["https://dl/1"])
    movie_id = movie["movie_id"]

    res = client.delete("/movies/delete", params={"movie_id": movie_id}, headers=auth["headers"])
    assert res.status_code == 200

    assert client.get("/movies/by_id", params={"movie_id": movie_id}).status_code == 404
    assert client.get("/movies/download_links", params={"movie_id": movie_id}).json()["data"] == []
    assert comment_threads(mongo).get(movie_id) is None
    assert review_threads(mongo).get(movie_id) is None

    res = client.delete("/movies/delete", params={"movie_id": movie_id}, headers=auth["headers"])
    assert res.status_code == 404
