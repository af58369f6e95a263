# ------------------------------------------------------------
# main.py — FastAPI 앱 팩토리/미들웨어/라우터 등록 진입점
# ------------------------------------------------------------

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import CORS_ORIGINS, LOG_LEVEL
from .db import Base, engine
from .errors import register_exception_handlers
from .routers import comments, live, movies, reviews, users

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# ORM 메타데이터 기준으로 "존재하지 않는 테이블만" 생성 (마이그레이션 도구 없음)
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Boomer API",
    description="Movie catalog, reviews, comments and download links",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 에러 응답도 {status, message, data} envelope로 통일
register_exception_handlers(app)

# -------------------------------
# 라우터 등록
# -------------------------------
# - auth:     /auth/signup, /auth/login
# - users:    /users
# - movies:   /movies
# - comments: /movie/comment
# - reviews:  /reviews
# - live:     /ws/reviews (WebSocket)
app.include_router(users.auth_router)
app.include_router(users.router)
app.include_router(movies.router)
app.include_router(comments.router)
app.include_router(reviews.router)
app.include_router(live.router)


@app.get("/")
def root():
    return {"ok": True, "service": "boomer-api"}
