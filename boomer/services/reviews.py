# ------------------------------------------------------------
# reviews.py — 리뷰 등록/수정/삭제와 영화 평균 평점 집계
# ------------------------------------------------------------

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Tuple

from pymongo.database import Database
from sqlalchemy.orm import Session

from ..errors import ConflictError, NotFoundError
from ..repositories import movies as movie_repo
from ..repositories.common import utcnow
from ..repositories.threads import review_threads

logger = logging.getLogger(__name__)

# 부분 수정 시 클라이언트가 덮어쓸 수 있는 리뷰 필드
REVIEW_FIELDS = ("profile_image", "user_name", "rating", "comment")


def compute_aggregate(reviews: List[dict]) -> Tuple[int, int]:
    """
    리뷰 목록의 (평균 평점, 리뷰 수)를 계산한다.
    - 평균은 정수로 반올림하며 .5는 0에서 멀어지는 쪽으로 올린다 (4.5 → 5)
    - 리뷰가 없으면 (0, 0)
    """
    count = len(reviews)
    if count == 0:
        return 0, 0
    total = sum(int(r.get("rating") or 0) for r in reviews)
    mean = Decimal(total) / Decimal(count)
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP)), count


def _write_aggregate(db: Session, movie_id: str, reviews: List[dict]):
    rating, count = compute_aggregate(reviews)
    if not movie_repo.set_rating(db, movie_id, rating, count):
        # 스레드는 있는데 영화 행이 없는 경우: 캐시할 곳이 없으므로 건너뜀
        logger.warning("review thread %s has no movie row; rating not cached", movie_id)
    return rating, count


def _save(threads, movie_id: str, reviews: List[dict], version: int) -> dict:
    saved = threads.replace_items(movie_id, reviews, version)
    if saved is None:
        logger.warning("review thread %s changed concurrently (version %s)", movie_id, version)
        raise ConflictError("Reviews were modified concurrently, please retry")
    return saved


def get_reviews(mongo: Database, movie_id: str) -> dict:
    thread = review_threads(mongo).get(movie_id)
    if thread is None:
        raise NotFoundError("Review not found")
    return thread


def add_or_update_review(
    db: Session,
    mongo: Database,
    movie_id: str,
    user_id: str,
    fields: dict,
    require_existing: bool = False,
) -> dict:
    """
    사용자당 리뷰 1개 규칙으로 리뷰를 추가하거나 부분 수정한다.

    - 스레드가 없으면 NotFound (영화 업로드 시 빈 스레드가 함께 만들어짐)
    - 같은 user_id 리뷰가 있으면: 보낸 필드만 덮어쓰고 updatedAt 갱신
    - 없으면: 새 리뷰 추가 (require_existing=True 이면 NotFound)
    - 저장 후 영화의 rating / rating_count 재계산

    Returns: 저장된 리뷰 1건
    """
    threads = review_threads(mongo)
    thread = threads.get(movie_id)
    if thread is None:
        raise NotFoundError("Movie not found")

    reviews = list(thread.get("reviews") or [])
    provided = {k: v for k, v in fields.items() if k in REVIEW_FIELDS and v is not None}
    now = utcnow()

    index = next((i for i, r in enumerate(reviews) if r.get("user_id") == user_id), None)
    if index is None:
        if require_existing:
            raise NotFoundError("Review not found")
        review = {"user_id": user_id, "rating": 0, **provided, "createdAt": now, "updatedAt": now}
        reviews.append(review)
        index = len(reviews) - 1
    else:
        review = {**reviews[index], **provided, "updatedAt": now}
        reviews[index] = review

    saved = _save(threads, movie_id, reviews, thread.get("version", 0))
    rating, count = _write_aggregate(db, movie_id, saved["reviews"])
    logger.info("review by %s saved on %s (rating=%s, count=%s)", user_id, movie_id, rating, count)
    return saved["reviews"][index]


def delete_review(db: Session, mongo: Database, movie_id: str, user_id: str) -> dict:
    """
    user_id의 리뷰를 지운다. 해당 리뷰가 없어도 성공으로 처리한다 (배열이 그대로 유지됨).
    """
    threads = review_threads(mongo)
    thread = threads.get(movie_id)
    if thread is None:
        raise NotFoundError("Movie not found")

    reviews = [r for r in thread.get("reviews") or [] if r.get("user_id") != user_id]
    saved = _save(threads, movie_id, reviews, thread.get("version", 0))
    _write_aggregate(db, movie_id, saved["reviews"])
    return saved
