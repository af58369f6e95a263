# ------------------------------------------------------------
# config.py — 환경변수 기반 설정값 모음
# ------------------------------------------------------------

import os
from dotenv import load_dotenv

# .env 파일의 환경변수를 현재 프로세스 환경에 주입
load_dotenv()

# -----------------------------
# 관계형 DB (SQLAlchemy)
# -----------------------------
DB_USER = os.getenv("DB_USER", "fastapiid")
DB_PASSWORD = os.getenv("DB_PASSWORD", "fastapipw")
DB_HOST = os.getenv("DB_HOST", "127.0.0.1")
DB_PORT = os.getenv("DB_PORT", "3306")
DB_NAME = os.getenv("DB_NAME", "boomerdb")

# DATABASE_URL이 지정되면 그대로 사용 (테스트에서는 sqlite://)
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}?charset=utf8mb4",
)

# -----------------------------
# 문서 DB (MongoDB)
# -----------------------------
MONGO_URL = os.getenv("MONGO_URL", "mongodb://127.0.0.1:27017")
MONGO_DB = os.getenv("MONGO_DB", "boomer")

# -----------------------------
# 인증 (JWT)
# -----------------------------
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", "1440"))

# -----------------------------
# 트렌딩 / 추천
# -----------------------------
TRENDING_WINDOW_DAYS = int(os.getenv("TRENDING_WINDOW_DAYS", "14"))
TRENDING_LIMIT = int(os.getenv("TRENDING_LIMIT", "12"))
DEFAULT_LIMIT = int(os.getenv("DEFAULT_LIMIT", "12"))

# -----------------------------
# 기타
# -----------------------------
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
