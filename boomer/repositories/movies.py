from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..models import Movie
from .common import new_id


def create_movie(db: Session, **fields) -> Movie:
    movie = Movie(movie_id=new_id(), **fields)
    db.add(movie)
    db.commit()
    db.refresh(movie)
    return movie


def get_movie(db: Session, movie_id: str) -> Optional[Movie]:
    return db.get(Movie, movie_id)


def all_movies(db: Session) -> List[Movie]:
    return db.query(Movie).all()


def list_movies(db: Session, skip: int = 0, limit: int = 100) -> List[Movie]:
    return (
        db.query(Movie)
        .order_by(Movie.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def list_by_type(db: Session, movie_type: str) -> List[Movie]:
    return db.query(Movie).filter(Movie.type == movie_type).all()


def search_by_title(db: Session, title: str) -> List[Movie]:
    # 대소문자 무시 부분 일치
    return db.query(Movie).filter(Movie.movie_title.ilike(f"%{title}%")).all()


def list_by_genres(db: Session, genres: List[str]) -> List[Movie]:
    # JSON 배열 교집합 조건은 DB마다 문법이 달라서 애플리케이션에서 거른다.
    wanted = {g.lower() for g in genres}
    return [
        m for m in db.query(Movie).all()
        if wanted & {g.lower() for g in (m.movie_genre or [])}
    ]


def list_recommended(db: Session) -> List[Movie]:
    return (
        db.query(Movie)
        .filter(Movie.recommend.is_(True))
        .order_by(Movie.rating.desc(), Movie.rating_count.desc())
        .all()
    )


def list_created_since(db: Session, since: datetime) -> List[Movie]:
    return (
        db.query(Movie)
        .filter(Movie.created_at >= since)
        .order_by(Movie.created_at.desc())
        .all()
    )


def get_many(db: Session, movie_ids: List[str]) -> Dict[str, Movie]:
    # IN 조회 결과는 순서가 보장되지 않으므로 id → Movie 사전으로 돌려준다.
    if not movie_ids:
        return {}
    return {m.movie_id: m for m in db.query(Movie).filter(Movie.movie_id.in_(movie_ids)).all()}


def update_movie(db: Session, movie: Movie, fields: dict) -> Movie:
    for key, value in fields.items():
        setattr(movie, key, value)
    db.commit()
    db.refresh(movie)
    return movie


def set_rating(db: Session, movie_id: str, rating: int, rating_count: int) -> bool:
    """리뷰 집계 결과를 캐시 컬럼에 기록한다. 영화가 없으면 False."""
    updated = (
        db.query(Movie)
        .filter(Movie.movie_id == movie_id)
        .update({Movie.rating: rating, Movie.rating_count: rating_count}, synchronize_session="fetch")
    )
    db.commit()
    return updated > 0


def delete_movie(db: Session, movie: Movie):
    db.delete(movie)
    db.commit()
