# -------------------------------------------------------
# db.py — SQLAlchemy 세션/엔진, MongoDB 클라이언트 및 FastAPI 의존성 정의
# -------------------------------------------------------

from pymongo import MongoClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from .config import DATABASE_URL, MONGO_URL, MONGO_DB

# ----------------------------------------------
# SQLAlchemy Engine 생성
# ----------------------------------------------
# - MySQL(PyMySQL): pool_pre_ping으로 죽은 커넥션 감지, 1시간마다 커넥션 재활용
# - SQLite 메모리 DB: 모든 세션이 같은 커넥션을 공유해야 테이블이 보임(StaticPool)
if DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(DATABASE_URL, pool_pre_ping=True, pool_recycle=3600)

# 명시적 commit() 전까지 커밋하지 않고, 자동 flush도 끈다.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 모든 ORM 모델이 상속받는 베이스 클래스
Base = declarative_base()

# ----------------------------------------------
# MongoDB 클라이언트
# ----------------------------------------------
# - MongoClient는 생성 시점에 접속하지 않고, 첫 명령에서 연결한다.
# - 댓글/리뷰 스레드(영화당 문서 1개)를 저장하는 용도
mongo_client = MongoClient(MONGO_URL, tz_aware=False)


def get_db():
    """
    FastAPI 의존성 주입용 DB 세션 제공자(Generator)

    동작:
    1) 요청이 들어오면 SessionLocal()로 세션 생성
    2) 핸들러에 주입(yield)
    3) 응답 후 finally 블록에서 세션 종료(close)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_mongo():
    """요청 핸들러에 MongoDB Database 핸들을 주입한다."""
    return mongo_client[MONGO_DB]


# -------------------------------------------------------
# [추가 설명]
# -------------------------------------------------------
# 1) 컬렉션 구성 (MongoDB)
#    - comments: { movie_id, comments: [...], version, created_at }
#    - reviews:  { movie_id, reviews:  [...], version, created_at }
#    - movie_id 에는 unique 인덱스가 걸린다. 첫 스레드 생성 시
#      ThreadRepo.create 가 create_index("movie_id", unique=True) 를 호출한다.
#
# 2) 테스트 구성
#    - DATABASE_URL=sqlite:// 로 두면 메모리 DB + StaticPool 조합으로 동작합니다.
#    - get_db / get_mongo 는 app.dependency_overrides 로 교체할 수 있습니다.
