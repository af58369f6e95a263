# ------------------------------------------------------------
# threads.py — 영화별 댓글/리뷰 스레드 문서 접근 (MongoDB)
# ------------------------------------------------------------
# 문서 구조: { movie_id, <field>: [...], version, created_at }
#  - comments 컬렉션: field = "comments"
#  - reviews  컬렉션: field = "reviews"
# 배열 전체를 읽고 → 수정하고 → 통째로 다시 쓰는 방식이라
# version 조건부 쓰기로 동시 수정(lost update)을 막는다.

from datetime import datetime
from typing import Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from .common import utcnow

COMMENTS = "comments"
REVIEWS = "reviews"

# _id(ObjectId)는 JSON 직렬화가 안 되므로 항상 제외
_PROJECTION = {"_id": 0}


class ThreadRepo:
    """movie_id 하나당 문서 하나인 스레드 컬렉션 접근자."""

    def __init__(self, mongo: Database, collection: str):
        self.col = mongo[collection]
        # 배열 필드 이름은 컬렉션 이름과 같다 (comments.comments / reviews.reviews)
        self.field = collection

    def get(self, movie_id: str) -> Optional[dict]:
        return self.col.find_one({"movie_id": movie_id}, _PROJECTION)

    def ensure_index(self):
        # movie_id 당 문서 1개. 중복 insert 는 DuplicateKeyError
        self.col.create_index("movie_id", unique=True)

    def create(self, movie_id: str) -> dict:
        self.ensure_index()
        doc = {"movie_id": movie_id, self.field: [], "version": 0, "created_at": utcnow()}
        self.col.insert_one(dict(doc))
        return doc

    def get_or_create(self, movie_id: str) -> dict:
        thread = self.get(movie_id)
        if thread is not None:
            return thread
        try:
            return self.create(movie_id)
        except DuplicateKeyError:
            # 다른 요청이 먼저 만들었으면 그 문서를 쓴다
            return self.get(movie_id)

    def replace_items(self, movie_id: str, items: List[dict], expected_version: int) -> Optional[dict]:
        """
        배열 전체를 교체하고 version을 1 올린다.
        - 읽을 때의 version과 현재 version이 다르면 아무것도 쓰지 않고 None 반환
        """
        return self.col.find_one_and_update(
            {"movie_id": movie_id, "version": expected_version},
            {"$set": {self.field: items}, "$inc": {"version": 1}},
            projection=_PROJECTION,
            return_document=ReturnDocument.AFTER,
        )

    def find_many(self, movie_ids: List[str]) -> Dict[str, dict]:
        if not movie_ids:
            return {}
        return {d["movie_id"]: d for d in self.col.find({"movie_id": {"$in": movie_ids}}, _PROJECTION)}

    def delete(self, movie_id: str) -> int:
        return self.col.delete_one({"movie_id": movie_id}).deleted_count


def comment_threads(mongo: Database) -> ThreadRepo:
    return ThreadRepo(mongo, COMMENTS)


def review_threads(mongo: Database) -> ThreadRepo:
    return ThreadRepo(mongo, REVIEWS)


def review_window_stats(mongo: Database, movie_ids: List[str], since: datetime) -> Dict[str, dict]:
    """
    aggregation pipeline으로 기간 내 리뷰 수/평균 평점을 계산한다.
    결과: { movie_id: {"review_count": n, "average_rating": avg} }
    기간 내 리뷰가 없는 영화는 결과에 포함되지 않는다.
    """
    if not movie_ids:
        return {}
    pipeline = [
        {"$match": {"movie_id": {"$in": movie_ids}}},
        {"$unwind": "$reviews"},
        {"$match": {"reviews.createdAt": {"$gte": since}}},
        {
            "$group": {
                "_id": "$movie_id",
                "review_count": {"$sum": 1},
                "average_rating": {"$avg": "$reviews.rating"},
            }
        },
    ]
    return {
        row["_id"]: {
            "review_count": row["review_count"],
            "average_rating": float(row["average_rating"] or 0),
        }
        for row in mongo[REVIEWS].aggregate(pipeline)
    }
