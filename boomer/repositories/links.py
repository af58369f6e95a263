from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import DownloadLink


def create_link(db: Session, movie_id: str, user_id: str, url: str, commit: bool = True) -> DownloadLink:
    link = DownloadLink(movie_id=movie_id, user_id=user_id, url=url, rating=0, rated_by=[])
    db.add(link)
    if commit:
        db.commit()
        db.refresh(link)
    return link


def get_link(db: Session, link_id: int) -> Optional[DownloadLink]:
    return db.get(DownloadLink, link_id)


def list_for_movie(db: Session, movie_id: str) -> List[DownloadLink]:
    return (
        db.query(DownloadLink)
        .filter(DownloadLink.movie_id == movie_id)
        .order_by(DownloadLink.rating.desc(), DownloadLink.id)
        .all()
    )


def increment_rating(db: Session, link_id: int, delta: int, user_id: str) -> DownloadLink:
    # rating은 UPDATE ... SET rating = rating + :delta 로 원자적으로 증감
    db.query(DownloadLink).filter(DownloadLink.id == link_id).update(
        {DownloadLink.rating: DownloadLink.rating + delta}, synchronize_session=False
    )
    link = db.get(DownloadLink, link_id)
    db.refresh(link)
    # JSON 컬럼은 제자리 변경을 감지하지 못하므로 새 리스트를 대입
    link.rated_by = [*(link.rated_by or []), user_id]
    db.commit()
    db.refresh(link)
    return link


def delete_for_movie(db: Session, movie_id: str) -> int:
    deleted = (
        db.query(DownloadLink)
        .filter(DownloadLink.movie_id == movie_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted
