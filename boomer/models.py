# ------------------------------------------------------------
# models.py — SQLAlchemy ORM 모델 정의 (users/movies/download_links)
# ------------------------------------------------------------
# 댓글/리뷰 스레드는 MongoDB 문서로 저장하므로 여기에는 없음 (repositories/threads.py 참고)

import enum

from sqlalchemy import (
    JSON, Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text,
)
from sqlalchemy.orm import relationship

from .db import Base
from .repositories.common import utcnow


class AgeRating(str, enum.Enum):
    R_RATED = "r_rated"
    EIGHTEEN = "eighteen"
    TWELVE = "twelve"
    PG13 = "pg13"


# ------------------------------
# User: 사용자 테이블
# ------------------------------
class User(Base):
    __tablename__ = "users"

    # 가입 시 user_name + 랜덤 접미사로 생성되는 공개 식별자
    user_id = Column(String(120), primary_key=True, index=True)
    user_name = Column(String(100), nullable=False)

    # 로그인 키. 중복 가입 방지를 위해 UNIQUE
    email = Column(String(255), nullable=False, unique=True, index=True)

    # werkzeug 해시 문자열 (응답 스키마에는 절대 포함하지 않음)
    password = Column(String(255), nullable=False)

    profile_img = Column(String(500))
    bio = Column(Text)
    country = Column(String(100))
    language = Column(String(100))
    interests = Column(JSON, default=list)

    isActive = Column(Boolean, default=True, nullable=False)
    suspended = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)


# ------------------------------
# Movie: 영화 테이블
# ------------------------------
class Movie(Base):
    __tablename__ = "movies"

    movie_id = Column(String(64), primary_key=True, index=True)

    # 업로더/편집자 정보
    poster_id = Column(String(120))
    poster_profile_image = Column(String(500))
    poster_user_name = Column(String(100))
    editor_id = Column(String(120))

    # 기본 메타데이터
    type = Column(String(50), index=True)
    movie_title = Column(String(255), nullable=False)
    movie_trailer = Column(String(500))
    synopsis = Column(Text)
    company = Column(String(255))
    industry = Column(String(100))
    language = Column(String(100))
    age_rating = Column(Enum(AgeRating))
    released = Column(Boolean, default=False)
    release_date = Column(DateTime)

    # 목록형 필드는 JSON 컬럼으로 저장 (MySQL JSON / SQLite TEXT)
    tags = Column(JSON, default=list)
    movie_genre = Column(JSON, default=list)
    movie_poster_image = Column(JSON, default=list)
    copyright_license = Column(JSON, default=list)

    # 리뷰 집계 결과 캐시 (services/reviews.py 가 갱신)
    rating = Column(Integer, default=0, nullable=False)
    rating_count = Column(Integer, default=0, nullable=False)

    # 큐레이션 추천 여부
    recommend = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # 영화 삭제 시 다운로드 링크는 서비스 레이어에서 명시적으로 먼저 지운다.
    download_links = relationship("DownloadLink", back_populates="movie", passive_deletes=True)


# ------------------------------
# DownloadLink: 영화별 다운로드 링크
# ------------------------------
class DownloadLink(Base):
    __tablename__ = "download_links"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    movie_id = Column(String(64), ForeignKey("movies.movie_id"), nullable=False, index=True)
    user_id = Column(String(120), nullable=False)
    url = Column(String(1000), nullable=False)

    # 좋은 링크면 +1, 나쁜 링크면 -1 (음수 가능)
    rating = Column(Integer, default=0, nullable=False)

    # 투표한 user_id 목록. 중복 제거하지 않음 (같은 사용자가 여러 번 투표 가능)
    rated_by = Column(JSON, default=list)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    movie = relationship("Movie", back_populates="download_links")
