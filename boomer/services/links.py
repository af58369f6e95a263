import logging
from typing import List

from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models import DownloadLink
from ..repositories import links as link_repo
from ..repositories import movies as movie_repo

logger = logging.getLogger(__name__)


def add_link(db: Session, movie_id: str, user_id: str, url: str) -> DownloadLink:
    if movie_repo.get_movie(db, movie_id) is None:
        raise NotFoundError("Movie not found")
    link = link_repo.create_link(db, movie_id, user_id, url)
    logger.info("download link %s added to %s", link.id, movie_id)
    return link


def rate_link(db: Session, link_id: int, direction: str, user_id: str) -> DownloadLink:
    """
    direction이 "inc"면 +1, 그 외("decr")면 -1.
    같은 사용자의 반복 투표도 그대로 반영되고 rated_by에 계속 쌓인다.
    """
    if link_repo.get_link(db, link_id) is None:
        raise NotFoundError("Download link not found")
    delta = 1 if direction == "inc" else -1
    return link_repo.increment_rating(db, link_id, delta, user_id)


def links_for_movie(db: Session, movie_id: str) -> List[DownloadLink]:
    return link_repo.list_for_movie(db, movie_id)
