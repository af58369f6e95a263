# ------------------------------------------------------------
# movies.py — 영화 업로드/조회/수정/삭제
# ------------------------------------------------------------

import logging
from typing import List

from pymongo.database import Database
from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models import Movie
from ..repositories import links as link_repo
from ..repositories import movies as movie_repo
from ..repositories.threads import comment_threads, review_threads
from ..schemas import MovieIn, MovieUpdate

logger = logging.getLogger(__name__)

_LIST_FIELDS = ("tags", "movie_genre", "movie_poster_image", "copyright_license")


def upload_movie(db: Session, mongo: Database, payload: MovieIn, uploader_id: str) -> Movie:
    """
    영화를 등록한다.
    - movie_id는 저장소 레이어에서 생성
    - 같은 movie_id로 빈 댓글/리뷰 스레드를 미리 만들어 둔다
    - download_links에 URL이 있으면 링크 레코드도 함께 생성
    """
    fields = payload.model_dump(exclude={"download_links"})
    fields["poster_id"] = fields.get("poster_id") or uploader_id
    movie = movie_repo.create_movie(db, **fields)

    comment_threads(mongo).create(movie.movie_id)
    review_threads(mongo).create(movie.movie_id)

    for url in payload.download_links:
        link_repo.create_link(db, movie.movie_id, uploader_id, url, commit=False)
    if payload.download_links:
        db.commit()

    logger.info("movie %s uploaded by %s", movie.movie_id, uploader_id)
    return movie


def get_movie(db: Session, movie_id: str) -> Movie:
    movie = movie_repo.get_movie(db, movie_id)
    if movie is None:
        raise NotFoundError("Movie not found")
    return movie


def list_movies(db: Session, skip: int = 0, limit: int = 100) -> List[Movie]:
    return movie_repo.list_movies(db, skip=skip, limit=limit)


def movies_by_genre(db: Session, genres: List[str]) -> List[Movie]:
    return movie_repo.list_by_genres(db, genres)


def movies_by_type(db: Session, movie_type: str) -> List[Movie]:
    return movie_repo.list_by_type(db, movie_type)


def search_movies(db: Session, title: str) -> List[Movie]:
    title = (title or "").strip()
    if not title:
        return []
    return movie_repo.search_by_title(db, title)


def update_movie(db: Session, payload: MovieUpdate) -> Movie:
    movie = get_movie(db, payload.movie_id)
    fields = payload.model_dump(exclude_unset=True, exclude={"movie_id"})
    for key in _LIST_FIELDS:
        if key in fields and fields[key] is None:
            fields[key] = []
    if fields.get("movie_title") is None:
        fields.pop("movie_title", None)
    return movie_repo.update_movie(db, movie, fields)


def set_recommend(db: Session, movie_id: str, recommend: bool) -> Movie:
    movie = get_movie(db, movie_id)
    return movie_repo.update_movie(db, movie, {"recommend": recommend})


def delete_movie(db: Session, mongo: Database, movie_id: str) -> Movie:
    """
    영화 삭제. DB 차원의 cascade가 아니라 단계별로 지운다:
    다운로드 링크 → 영화 → 댓글/리뷰 스레드
    중간에 실패하면 앞 단계는 되돌리지 않는다.
    """
    movie = get_movie(db, movie_id)
    removed = link_repo.delete_for_movie(db, movie_id)
    movie_repo.delete_movie(db, movie)
    comment_threads(mongo).delete(movie_id)
    review_threads(mongo).delete(movie_id)
    logger.info("movie %s deleted with %d download links", movie_id, removed)
    return movie
