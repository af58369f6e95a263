# -----------------------------------------------------------
# reviews.py — 영화 리뷰 엔드포인트 (등록/수정/조회/삭제)
# -----------------------------------------------------------
# 리뷰가 바뀔 때마다 영화의 rating / rating_count 가 다시 계산된다.

from typing import Optional

from fastapi import APIRouter, Depends
from pymongo.database import Database
from sqlalchemy.orm import Session

from ..db import get_db, get_mongo
from ..models import User
from ..schemas import Envelope, ReviewIn
from ..services import reviews as review_service
from ..services.auth import get_current_user

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.put("", response_model=Envelope)
def post_review(
    payload: ReviewIn,
    db: Session = Depends(get_db),
    mongo: Database = Depends(get_mongo),
    user: User = Depends(get_current_user),
):
    """같은 user_id 리뷰가 이미 있으면 새로 추가하지 않고 그 리뷰를 수정합니다."""
    review = review_service.add_or_update_review(
        db, mongo, payload.movie_id, payload.user_id, payload.model_dump(exclude={"movie_id", "user_id"})
    )
    return Envelope(message="Review saved and movie rating updated", data=review)


@router.put("/update", response_model=Envelope)
def update_review(
    payload: ReviewIn,
    db: Session = Depends(get_db),
    mongo: Database = Depends(get_mongo),
    user: User = Depends(get_current_user),
):
    # 기존 리뷰가 없으면 404
    review = review_service.add_or_update_review(
        db, mongo, payload.movie_id, payload.user_id,
        payload.model_dump(exclude={"movie_id", "user_id"}),
        require_existing=True,
    )
    return Envelope(message="Review updated successfully and average rating recalculated", data=review)


@router.get("", response_model=Envelope)
def get_reviews(movie_id: str, mongo: Database = Depends(get_mongo)):
    return Envelope(data=review_service.get_reviews(mongo, movie_id))


@router.delete("/delete", response_model=Envelope)
def delete_review(
    movie_id: str,
    user_id: Optional[str] = None,
    db: Session = Depends(get_db),
    mongo: Database = Depends(get_mongo),
    user: User = Depends(get_current_user),
):
    # user_id를 생략하면 로그인 사용자의 리뷰를 삭제
    thread = review_service.delete_review(db, mongo, movie_id, user_id or user.user_id)
    return Envelope(message="Review deleted successfully", data=thread)
