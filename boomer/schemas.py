from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from .models import AgeRating


# ------------------------------------------------------------
# Envelope: 모든 응답의 공통 포맷 {status, message, data}
# ------------------------------------------------------------
class Envelope(BaseModel):
    status: int = 200
    message: str = "success"
    data: Any = None


# ------------------------------------------------------------
# 영화
# ------------------------------------------------------------
class MovieIn(BaseModel):
    # 업로드 요청 바디. movie_id는 서버에서 생성한다.
    movie_title: str = Field(..., min_length=1)
    movie_trailer: Optional[str] = None
    type: Optional[str] = None
    tags: List[str] = []
    synopsis: Optional[str] = None
    movie_genre: List[str] = []
    released: Optional[bool] = None
    release_date: Optional[datetime] = None
    copyright_license: List[str] = []
    company: Optional[str] = None
    movie_poster_image: List[str] = []
    age_rating: Optional[AgeRating] = None
    industry: Optional[str] = None
    language: Optional[str] = None
    poster_id: Optional[str] = None
    poster_profile_image: Optional[str] = None
    poster_user_name: Optional[str] = None
    editor_id: Optional[str] = None
    # 업로드와 동시에 생성할 다운로드 링크 URL 목록
    download_links: List[str] = []


class MovieUpdate(BaseModel):
    # 부분 수정: 보낸 필드만 반영 (rating/rating_count는 리뷰 집계 전용이라 제외)
    movie_id: str
    movie_title: Optional[str] = None
    movie_trailer: Optional[str] = None
    type: Optional[str] = None
    tags: Optional[List[str]] = None
    synopsis: Optional[str] = None
    movie_genre: Optional[List[str]] = None
    released: Optional[bool] = None
    release_date: Optional[datetime] = None
    copyright_license: Optional[List[str]] = None
    company: Optional[str] = None
    movie_poster_image: Optional[List[str]] = None
    age_rating: Optional[AgeRating] = None
    industry: Optional[str] = None
    language: Optional[str] = None
    editor_id: Optional[str] = None


class MovieOut(BaseModel):
    movie_id: str
    movie_title: str
    movie_trailer: Optional[str] = None
    type: Optional[str] = None
    tags: List[str] = []
    synopsis: Optional[str] = None
    movie_genre: List[str] = []
    released: Optional[bool] = None
    release_date: Optional[datetime] = None
    copyright_license: List[str] = []
    company: Optional[str] = None
    movie_poster_image: List[str] = []
    age_rating: Optional[AgeRating] = None
    industry: Optional[str] = None
    language: Optional[str] = None
    poster_id: Optional[str] = None
    poster_profile_image: Optional[str] = None
    poster_user_name: Optional[str] = None
    editor_id: Optional[str] = None
    rating: int = 0
    rating_count: int = 0
    recommend: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MovieCard(BaseModel):
    # 트렌딩/탑레이티드 목록에서 쓰는 표시용 projection
    movie_id: str
    movie_title: str
    movie_poster_image: List[str] = []
    movie_genre: List[str] = []
    type: Optional[str] = None
    rating: int = 0
    review_count: int = 0
    average_rating: float = 0.0


class GenreQuery(BaseModel):
    movie_genre: List[str]


class SearchQuery(BaseModel):
    movie_title: str = ""


class RecommendUpdate(BaseModel):
    movie_id: str
    recommend: bool


class RecommendationOut(BaseModel):
    movie: MovieOut
    score: float


# ------------------------------------------------------------
# 다운로드 링크
# ------------------------------------------------------------
class DownloadLinkIn(BaseModel):
    movie_id: str
    url: str = Field(..., min_length=1)
    user_id: Optional[str] = None  # 없으면 로그인 사용자


class DownloadLinkRate(BaseModel):
    id: int
    # inc: +1, decr: -1
    rating: Literal["inc", "decr"]
    user_id: Optional[str] = None


class DownloadLinkOut(BaseModel):
    id: int
    movie_id: str
    user_id: str
    url: str
    rating: int = 0
    rated_by: List[str] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ------------------------------------------------------------
# 댓글
# ------------------------------------------------------------
class CommentIn(BaseModel):
    movie_id: str
    user_id: str
    user_name: Optional[str] = None
    text: Optional[str] = None
    image: Optional[str] = None
    gif: Optional[str] = None
    video: Optional[str] = None
    url: Optional[str] = None


class CommentReply(BaseModel):
    movie_id: str
    comment_id: str
    user_id: str
    user_name: Optional[str] = None
    text: str


class CommentReaction(BaseModel):
    # likes/dislikes 값은 절대값이 아니라 방향: true → +1, false → -1
    movie_id: str
    comment_id: str
    user_id: Optional[str] = None
    likes: bool = True
    dislikes: bool = True


# ------------------------------------------------------------
# 리뷰
# ------------------------------------------------------------
class ReviewIn(BaseModel):
    movie_id: str
    user_id: str
    profile_image: Optional[str] = None
    user_name: Optional[str] = None
    rating: Optional[int] = Field(None, ge=0, le=10)
    comment: Optional[str] = None


# ------------------------------------------------------------
# 사용자 / 인증
# ------------------------------------------------------------
class SignupIn(BaseModel):
    user_name: str = Field(..., min_length=1, max_length=80)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class UserUpdate(BaseModel):
    user_name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    profile_img: Optional[str] = None
    bio: Optional[str] = None
    country: Optional[str] = None
    language: Optional[str] = None
    interests: Optional[List[str]] = None


class UserOut(BaseModel):
    # password는 절대 노출하지 않음
    user_id: str
    user_name: str
    email: str
    profile_img: Optional[str] = None
    bio: Optional[str] = None
    country: Optional[str] = None
    language: Optional[str] = None
    interests: List[str] = []
    isActive: bool = True
    suspended: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
