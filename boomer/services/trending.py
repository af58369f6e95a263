# --------------------------------------------------------------
# trending.py — 기간 내 리뷰 활동 기준 트렌딩 영화 순위
# --------------------------------------------------------------

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from pymongo.database import Database
from sqlalchemy.orm import Session

from ..config import TRENDING_LIMIT, TRENDING_WINDOW_DAYS
from ..repositories import movies as movie_repo
from ..repositories.common import utcnow
from ..repositories.threads import review_threads, review_window_stats
from ..schemas import MovieCard

logger = logging.getLogger(__name__)

IN_PROCESS = "in_process"
PIPELINE = "pipeline"


def window_stats(reviews: List[dict], since: datetime) -> Tuple[int, float]:
    """기간(since 이후) 안에 작성된 리뷰만으로 (리뷰 수, 평균 평점)을 계산. 없으면 (0, 0.0)"""
    in_window = [
        r for r in reviews
        if r.get("createdAt") is not None and r["createdAt"] >= since
    ]
    if not in_window:
        return 0, 0.0
    total = sum(r.get("rating") or 0 for r in in_window)
    return len(in_window), total / len(in_window)


def rank(stats: Dict[str, Tuple[int, float]], candidates: List[str]) -> List[str]:
    """
    후보 movie_id를 (리뷰 수 내림차순, 평균 평점 내림차순)으로 정렬.
    - 둘 다 같으면 candidates의 원래 순서를 유지 (sorted는 stable)
    """
    return sorted(
        candidates,
        key=lambda mid: (-stats.get(mid, (0, 0.0))[0], -stats.get(mid, (0, 0.0))[1]),
    )


def _stats_in_process(mongo: Database, movie_ids: List[str], since: datetime) -> Dict[str, Tuple[int, float]]:
    # 스레드를 통째로 가져와 파이썬에서 기간 필터
    threads = review_threads(mongo).find_many(movie_ids)
    return {
        mid: window_stats(threads[mid].get("reviews") or [], since)
        for mid in movie_ids
        if mid in threads
    }


def _stats_pipeline(mongo: Database, movie_ids: List[str], since: datetime) -> Dict[str, Tuple[int, float]]:
    # 같은 계산을 문서 DB의 aggregation pipeline에 맡김
    rows = review_window_stats(mongo, movie_ids, since)
    return {mid: (row["review_count"], row["average_rating"]) for mid, row in rows.items()}


def trending_movies(
    db: Session,
    mongo: Database,
    window_days: int = TRENDING_WINDOW_DAYS,
    limit: int = TRENDING_LIMIT,
    strategy: str = IN_PROCESS,
    now: Optional[datetime] = None,
) -> List[MovieCard]:
    """
    최근 window_days 동안의 리뷰 활동으로 상위 limit개 영화를 돌려준다.

    동작 흐름
    --------
    1) 기간 안에 등록된 영화 조회 (관계형 DB)
    2) 해당 영화들의 리뷰 스레드에서 기간 안 리뷰만 골라 수/평균 계산
       - in_process: 스레드 조회 후 파이썬에서 필터
       - pipeline:   $unwind/$match/$group 파이프라인
       - 기간 내 리뷰가 없는 영화는 (0, 0.0)으로 순위에 포함
    3) (리뷰 수 desc, 평균 desc) 정렬 후 상위 limit개
    4) 표시용 필드를 다시 조회해 3)의 순서대로 재정렬
    """
    since = (now or utcnow()) - timedelta(days=window_days)

    movies = movie_repo.list_created_since(db, since)
    if not movies:
        return []
    candidates = [m.movie_id for m in movies]

    if strategy == PIPELINE:
        stats = _stats_pipeline(mongo, candidates, since)
    elif strategy == IN_PROCESS:
        stats = _stats_in_process(mongo, candidates, since)
    else:
        raise ValueError(f"unknown trending strategy: {strategy}")

    top_ids = rank(stats, candidates)[:limit]

    # IN 조회는 순서를 보장하지 않으므로 top_ids 순서로 다시 맞춘다.
    by_id = movie_repo.get_many(db, top_ids)
    cards = []
    for mid in top_ids:
        m = by_id.get(mid)
        if m is None:
            continue
        count, avg = stats.get(mid, (0, 0.0))
        cards.append(
            MovieCard(
                movie_id=m.movie_id,
                movie_title=m.movie_title,
                movie_poster_image=m.movie_poster_image or [],
                movie_genre=m.movie_genre or [],
                type=m.type,
                rating=m.rating or 0,
                review_count=count,
                average_rating=round(avg, 2),
            )
        )
    logger.debug("trending (%s, %d days): %d of %d candidates", strategy, window_days, len(cards), len(candidates))
    return cards


# --------------------------------------------------------------
# [추가 설명]
# --------------------------------------------------------------
# 1) 예시 호출
#    - GET /movies/trending    -> in_process 전략 (기본, 14일 / 12개)
#    - GET /movies/top_rated   -> pipeline 전략 (같은 입력/출력, 실행 위치만 다름)
#
# 2) 기간/개수는 TRENDING_WINDOW_DAYS, TRENDING_LIMIT 환경변수로 조절합니다.
