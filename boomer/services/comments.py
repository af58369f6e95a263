# ------------------------------------------------------------
# comments.py — 영화 댓글 스레드 변경 (추가/삭제/답글/좋아요/싫어요)
# ------------------------------------------------------------
# 모든 변경은 같은 패턴을 따른다:
#   1) 스레드 문서 조회 (version 포함)
#   2) 댓글 배열 전체를 새로 계산 (대상 외 댓글은 그대로)
#   3) version 조건부로 배열 전체를 한 번에 저장

import logging
from typing import Callable, List

from pymongo.database import Database

from ..errors import ConflictError, NotFoundError
from ..repositories.common import new_id, utcnow
from ..repositories.threads import comment_threads

logger = logging.getLogger(__name__)

COMMENT_FIELDS = ("user_id", "user_name", "text", "image", "gif", "video", "url")


def _load(threads, movie_id: str) -> dict:
    thread = threads.get(movie_id)
    if thread is None or thread.get("comments") is None:
        raise NotFoundError("Movie or comment not found")
    return thread


def _save(threads, movie_id: str, comments: List[dict], version: int) -> dict:
    saved = threads.replace_items(movie_id, comments, version)
    if saved is None:
        logger.warning("comment thread %s changed concurrently (version %s)", movie_id, version)
        raise ConflictError("Comments were modified concurrently, please retry")
    return saved


def _update_one(mongo: Database, movie_id: str, comment_id: str, change: Callable[[dict], dict]) -> dict:
    """comment_id 댓글 하나에 change를 적용해 저장. 댓글이 없으면 NotFound."""
    threads = comment_threads(mongo)
    thread = _load(threads, movie_id)

    comments = thread["comments"]
    if not any(c.get("comment_id") == comment_id for c in comments):
        raise NotFoundError("Comment not found")

    updated = [change(c) if c.get("comment_id") == comment_id else c for c in comments]
    return _save(threads, movie_id, updated, thread.get("version", 0))


def add_comment(mongo: Database, movie_id: str, fields: dict) -> dict:
    """스레드가 없으면 만들고 새 댓글을 맨 뒤에 붙인다."""
    threads = comment_threads(mongo)
    thread = threads.get_or_create(movie_id)

    comment = {k: fields.get(k) for k in COMMENT_FIELDS if fields.get(k) is not None}
    comment.update(
        comment_id=new_id(),
        likes=0,
        dislikes=0,
        replies=[],
        created_at=utcnow(),
    )
    comments = [*(thread.get("comments") or []), comment]
    saved = _save(threads, movie_id, comments, thread.get("version", 0))
    logger.info("comment %s added on %s", comment["comment_id"], movie_id)
    return saved


def get_comments(mongo: Database, movie_id: str) -> dict:
    thread = comment_threads(mongo).get(movie_id)
    if thread is None:
        raise NotFoundError("can not find comments")
    return thread


def delete_comment(mongo: Database, movie_id: str, comment_id: str) -> dict:
    # 없는 comment_id면 배열이 그대로 저장되고 성공으로 응답
    threads = comment_threads(mongo)
    thread = _load(threads, movie_id)
    comments = [c for c in thread["comments"] if c.get("comment_id") != comment_id]
    return _save(threads, movie_id, comments, thread.get("version", 0))


def reply(mongo: Database, movie_id: str, comment_id: str, user_id: str, user_name: str, text: str) -> dict:
    entry = {"user_id": user_id, "user_name": user_name, "comment": text}
    return _update_one(
        mongo, movie_id, comment_id,
        lambda c: {**c, "replies": [*(c.get("replies") or []), entry]},
    )


def react(mongo: Database, movie_id: str, comment_id: str, kind: str, positive: bool) -> dict:
    """
    좋아요/싫어요 카운터를 +1 또는 -1 한다.
    - kind: "like" | "dislike"
    - 카운터가 비어 있으면 0으로 보고 증감
    """
    if kind not in ("like", "dislike"):
        raise ValueError(f"unknown reaction: {kind}")
    counter = "likes" if kind == "like" else "dislikes"
    delta = 1 if positive else -1
    return _update_one(
        mongo, movie_id, comment_id,
        lambda c: {**c, counter: (c.get(counter) or 0) + delta},
    )
