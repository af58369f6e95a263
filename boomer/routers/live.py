# -----------------------------------------------------------
# live.py — 리뷰 실시간 채널 (WebSocket)
# -----------------------------------------------------------
# 클라이언트 메시지:
#   {"event": "create" | "update" | "delete" | "list", "movie_id": "...", ...}
# - create/update/delete: 토큰 필요, 처리 후 최신 리뷰 스레드를 모든 연결에 브로드캐스트
# - list: 요청한 클라이언트에게만 리뷰 스레드 전송
# - 실패: 요청한 클라이언트에게 {"event": "error", "status", "message"}

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError
from pymongo.database import Database
from pymongo.errors import PyMongoError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db, get_mongo
from ..errors import BadRequestError, ServiceError, UnauthorizedError
from ..live import review_hub
from ..schemas import ReviewIn
from ..services import reviews as review_service
from ..services.auth import user_from_token

logger = logging.getLogger(__name__)
router = APIRouter(tags=["live"])

MUTATIONS = ("create", "update", "delete")
EVENTS = MUTATIONS + ("list",)


def _review_fields(msg: dict, user_id: str) -> dict:
    # HTTP PUT /reviews 와 같은 규칙(ReviewIn)으로 검증한 뒤 넘긴다
    try:
        review = ReviewIn.model_validate({**msg, "user_id": user_id})
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ()))
        raise BadRequestError(f"invalid {field}: {err.get('msg')}")
    return review.model_dump(include=set(review_service.REVIEW_FIELDS))


def _handle(db: Session, mongo: Database, user, msg: dict) -> dict:
    """메시지 1건 처리 후 해당 영화의 리뷰 스레드를 돌려준다 (threadpool에서 실행)."""
    event = msg.get("event")
    if event not in EVENTS:
        raise BadRequestError(f"unknown event: {event}")

    movie_id = msg.get("movie_id")
    if not movie_id or not isinstance(movie_id, str):
        raise BadRequestError("movie_id is required")

    if event in MUTATIONS and user is None:
        raise UnauthorizedError("Not authenticated")

    if event in ("create", "update"):
        user_id = msg.get("user_id") or user.user_id
        review_service.add_or_update_review(
            db, mongo, movie_id, user_id, _review_fields(msg, user_id),
            require_existing=(event == "update"),
        )
    elif event == "delete":
        review_service.delete_review(db, mongo, movie_id, msg.get("user_id") or user.user_id)

    return review_service.get_reviews(mongo, movie_id)


@router.websocket("/ws/reviews")
async def reviews_socket(
    ws: WebSocket,
    token: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    mongo: Database = Depends(get_mongo),
):
    await review_hub.connect(ws)

    user = None
    if token:
        try:
            user = await run_in_threadpool(user_from_token, db, token)
        except ServiceError as e:
            await review_hub.send(ws, "error", status=e.status_code, message=e.message)

    try:
        while True:
            raw = await ws.receive_text()
            try:
                msg = json.loads(raw)
                if not isinstance(msg, dict):
                    raise BadRequestError("message must be a JSON object")
                thread = await run_in_threadpool(_handle, db, mongo, user, msg)
            except json.JSONDecodeError:
                await review_hub.send(ws, "error", status=400, message="invalid JSON")
                continue
            except ServiceError as e:
                await review_hub.send(ws, "error", status=e.status_code, message=e.message)
                continue
            except (SQLAlchemyError, PyMongoError):
                logger.exception("review socket message failed: %s", raw)
                db.rollback()
                await review_hub.send(ws, "error", status=500, message="Internal server error")
                continue

            if msg.get("event") in MUTATIONS:
                await review_hub.broadcast("reviews", thread)
            else:
                await review_hub.send(ws, "reviews", thread)
    except WebSocketDisconnect:
        pass
    finally:
        await review_hub.disconnect(ws)
