# ---------------------------------------------
# movies.py — 영화 / 다운로드 링크 / 트렌딩 / 추천 엔드포인트
# ---------------------------------------------

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database
from sqlalchemy.orm import Session

from ..config import DEFAULT_LIMIT
from ..db import get_db, get_mongo
from ..models import User
from ..schemas import (
    DownloadLinkIn, DownloadLinkOut, DownloadLinkRate, Envelope, GenreQuery,
    MovieIn, MovieOut, MovieUpdate, RecommendationOut, RecommendUpdate, SearchQuery,
)
from ..services import links as link_service
from ..services import movies as movie_service
from ..services import recommender, trending
from ..services.auth import get_current_user

# 이 라우터의 모든 엔드포인트는 "/movies"로 시작
router = APIRouter(prefix="/movies", tags=["movies"])


def _movies(items):
    return [MovieOut.model_validate(m) for m in items]


@router.post("", response_model=Envelope)
def upload_movie(
    payload: MovieIn,
    db: Session = Depends(get_db),
    mongo: Database = Depends(get_mongo),
    user: User = Depends(get_current_user),
):
    """
    영화를 업로드합니다.
    - 빈 댓글/리뷰 스레드가 같은 movie_id로 함께 생성됩니다.
    - download_links의 URL마다 다운로드 링크가 생성됩니다.
    """
    movie = movie_service.upload_movie(db, mongo, payload, uploader_id=user.user_id)
    return Envelope(message="Movie uploaded successfully", data=MovieOut.model_validate(movie))


@router.get("", response_model=Envelope)
def list_movies(
    skip: int = Query(0, ge=0),            # OFFSET
    limit: int = Query(100, ge=1, le=500),  # LIMIT
    db: Session = Depends(get_db),
):
    return Envelope(data=_movies(movie_service.list_movies(db, skip=skip, limit=limit)))


@router.get("/by_id", response_model=Envelope)
def get_movie_by_id(movie_id: str, db: Session = Depends(get_db)):
    return Envelope(data=MovieOut.model_validate(movie_service.get_movie(db, movie_id)))


@router.post("/genre", response_model=Envelope)
def get_movies_by_genre(payload: GenreQuery, db: Session = Depends(get_db)):
    # 요청한 장르 중 하나라도 포함하는 영화 (없으면 빈 리스트)
    return Envelope(data=_movies(movie_service.movies_by_genre(db, payload.movie_genre)))


@router.get("/type", response_model=Envelope)
def get_movies_by_type(type: str, db: Session = Depends(get_db)):
    return Envelope(data=_movies(movie_service.movies_by_type(db, type)))


@router.post("/search", response_model=Envelope)
def search_movies(payload: SearchQuery, db: Session = Depends(get_db)):
    return Envelope(data=_movies(movie_service.search_movies(db, payload.movie_title)))


@router.get("/search", response_model=Envelope)
def search_movies_by_query(movie_title: str = "", db: Session = Depends(get_db)):
    return Envelope(data=_movies(movie_service.search_movies(db, movie_title)))


@router.get("/trending", response_model=Envelope)
def get_trending(db: Session = Depends(get_db), mongo: Database = Depends(get_mongo)):
    """최근 기간 내 리뷰 수 → 평균 평점 순 상위 영화 (애플리케이션 내 집계)"""
    return Envelope(data=trending.trending_movies(db, mongo, strategy=trending.IN_PROCESS))


@router.get("/top_rated", response_model=Envelope)
def get_top_rated(db: Session = Depends(get_db), mongo: Database = Depends(get_mongo)):
    """/trending과 같은 순위를 문서 DB aggregation pipeline으로 계산"""
    return Envelope(data=trending.trending_movies(db, mongo, strategy=trending.PIPELINE))


@router.put("/update", response_model=Envelope)
def update_movie(
    payload: MovieUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    movie = movie_service.update_movie(db, payload)
    return Envelope(message="Movie updated successfully", data=MovieOut.model_validate(movie))


@router.put("/add_download_link", response_model=Envelope)
def add_download_link(
    payload: DownloadLinkIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    link = link_service.add_link(db, payload.movie_id, payload.user_id or user.user_id, payload.url)
    return Envelope(message="Download link added", data=DownloadLinkOut.model_validate(link))


@router.put("/rate_download_link", response_model=Envelope)
def rate_download_link(
    payload: DownloadLinkRate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    link = link_service.rate_link(db, payload.id, payload.rating, payload.user_id or user.user_id)
    return Envelope(message="Download link rated", data=DownloadLinkOut.model_validate(link))


@router.get("/download_links", response_model=Envelope)
def get_download_links(movie_id: str, db: Session = Depends(get_db)):
    links = link_service.links_for_movie(db, movie_id)
    return Envelope(data=[DownloadLinkOut.model_validate(link) for link in links])


@router.put("/update_recommends", response_model=Envelope)
def update_recommends(
    payload: RecommendUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    movie = movie_service.set_recommend(db, payload.movie_id, payload.recommend)
    return Envelope(message="Recommendation updated", data=MovieOut.model_validate(movie))


@router.get("/get_recommendations", response_model=Envelope)
def get_recommendations(
    movie_id: Optional[str] = None,
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """
    - movie_id 없음: 큐레이션(recommend=true) 영화를 평점순으로
    - movie_id 있음: 해당 영화와 비슷한 영화 (TF-IDF 유사도 + 큐레이션 가중치)
    """
    if movie_id is None:
        return Envelope(data=_movies(recommender.curated(db, limit=limit)))
    recs = recommender.recommend_similar(db, movie_id, limit=limit)
    return Envelope(
        data=[RecommendationOut(movie=MovieOut.model_validate(m), score=score) for m, score in recs]
    )


@router.delete("/delete", response_model=Envelope)
def delete_movie(
    movie_id: str,
    db: Session = Depends(get_db),
    mongo: Database = Depends(get_mongo),
    user: User = Depends(get_current_user),
):
    movie_service.delete_movie(db, mongo, movie_id)
    return Envelope(message="Movie deleted successfully", data={"movie_id": movie_id})


# -----------------------------
# [추가 설명]
# -----------------------------
# 예시 요청
#  - GET  /movies?skip=0&limit=20
#  - GET  /movies/by_id?movie_id=...
#  - POST /movies/genre            (JSON: {"movie_genre": ["action", "sci-fi"]})
#  - GET  /movies/search?movie_title=incep
#  - GET  /movies/trending
#  - PUT  /movies/rate_download_link (JSON: {"id": 3, "rating": "inc"})
