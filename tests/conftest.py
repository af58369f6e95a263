import os

# boomer 모듈을 import 하기 전에 테스트용 DB 설정을 먼저 주입
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import mongomock
import pytest
from fastapi.testclient import TestClient

from boomer.db import Base, SessionLocal, engine, get_db, get_mongo
from boomer.main import app
from boomer.repositories import movies as movie_repo
from boomer.repositories.threads import comment_threads, review_threads


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def mongo():
    return mongomock.MongoClient()["boomer_test"]


@pytest.fixture
def client(db, mongo):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_mongo] = lambda: mongo
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _signup(client, name, email):
    res = client.post(
        "/auth/signup",
        json={"user_name": name, "email": email, "password": "secret123"},
    )
    assert res.status_code == 200, res.text
    data = res.json()["data"]
    return {
        "headers": {"Authorization": f"Bearer {data['access_token']}"},
        "user_id": data["user"]["user_id"],
        "token": data["access_token"],
    }


@pytest.fixture
def auth(client):
    return _signup(client, "tester", "tester@boomer.io")


@pytest.fixture
def other_auth(client):
    return _signup(client, "other", "other@boomer.io")


@pytest.fixture
def make_movie(db, mongo):
    """서비스 테스트용: 영화 행 + 빈 댓글/리뷰 스레드를 만든다."""

    def _make(title="Inception", **fields):
        movie = movie_repo.create_movie(db, movie_title=title, **fields)
        comment_threads(mongo).create(movie.movie_id)
        review_threads(mongo).create(movie.movie_id)
        return movie

    return _make
