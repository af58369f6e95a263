# -----------------------------------------------------------
# comments.py — 영화 댓글/답글/좋아요/싫어요 엔드포인트
# -----------------------------------------------------------

from fastapi import APIRouter, Depends
from pymongo.database import Database

from ..db import get_mongo
from ..models import User
from ..schemas import CommentIn, CommentReaction, CommentReply, Envelope
from ..services import comments as comment_service
from ..services.auth import get_current_user

router = APIRouter(prefix="/movie/comment", tags=["comments"])


@router.put("", response_model=Envelope)
def add_comment(
    payload: CommentIn,
    mongo: Database = Depends(get_mongo),
    user: User = Depends(get_current_user),
):
    """
    댓글을 추가합니다. 스레드가 없으면 먼저 만듭니다.
    새 댓글은 likes=0, dislikes=0, replies=[] 로 시작합니다.
    """
    fields = payload.model_dump(exclude={"movie_id"})
    thread = comment_service.add_comment(mongo, payload.movie_id, fields)
    return Envelope(message="Commented on movie successfully", data=thread)


@router.get("", response_model=Envelope)
def get_comments(movie_id: str, mongo: Database = Depends(get_mongo)):
    return Envelope(data=comment_service.get_comments(mongo, movie_id))


@router.put("/like", response_model=Envelope)
def like_comment(
    payload: CommentReaction,
    mongo: Database = Depends(get_mongo),
    user: User = Depends(get_current_user),
):
    # likes=true → +1, likes=false → -1
    thread = comment_service.react(mongo, payload.movie_id, payload.comment_id, "like", payload.likes)
    return Envelope(message="Comment liked", data=thread)


@router.put("/dislike", response_model=Envelope)
def dislike_comment(
    payload: CommentReaction,
    mongo: Database = Depends(get_mongo),
    user: User = Depends(get_current_user),
):
    thread = comment_service.react(mongo, payload.movie_id, payload.comment_id, "dislike", payload.dislikes)
    return Envelope(message="Comment disliked", data=thread)


@router.put("/reply", response_model=Envelope)
def reply_comment(
    payload: CommentReply,
    mongo: Database = Depends(get_mongo),
    user: User = Depends(get_current_user),
):
    thread = comment_service.reply(
        mongo,
        payload.movie_id,
        payload.comment_id,
        user_id=payload.user_id,
        user_name=payload.user_name or user.user_name,
        text=payload.text,
    )
    return Envelope(message="Replied to comment successfully", data=thread)


@router.delete("/delete", response_model=Envelope)
def delete_comment(
    movie_id: str,
    comment_id: str,
    mongo: Database = Depends(get_mongo),
    user: User = Depends(get_current_user),
):
    thread = comment_service.delete_comment(mongo, movie_id, comment_id)
    return Envelope(message="Comment deleted successfully", data=thread)
