# -----------------------------------------------------------
# users.py — 회원가입/로그인 및 사용자 프로필 엔드포인트
# -----------------------------------------------------------

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import User
from ..schemas import Envelope, LoginIn, SignupIn, UserOut, UserUpdate
from ..services import auth as auth_service
from ..services.auth import get_current_user

# /auth/*  : 토큰 발급
# /users/* : 프로필 조회/수정
auth_router = APIRouter(prefix="/auth", tags=["auth"])
router = APIRouter(prefix="/users", tags=["users"])


def _session(user: User) -> dict:
    return {
        "user": UserOut.model_validate(user),
        "access_token": auth_service.create_token(user),
        "token_type": "bearer",
    }


@auth_router.post("/signup", response_model=Envelope)
def signup(payload: SignupIn, db: Session = Depends(get_db)):
    """
    계정을 만들고 바로 사용할 수 있는 bearer 토큰을 돌려줍니다.
    - 같은 email이 있으면 400
    - 응답에 password는 포함되지 않습니다.
    """
    user = auth_service.signup(db, payload)
    return Envelope(message="Account created successfully", data=_session(user))


@auth_router.post("/login", response_model=Envelope)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = auth_service.login(db, payload.email, payload.password)
    return Envelope(message="Logged in successfully", data=_session(user))


@router.get("", response_model=Envelope)
def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    """가입한 사용자 목록 (로그인 필요, 최근 가입순). password는 응답에서 제외됩니다."""
    users = auth_service.list_users(db, skip=skip, limit=limit)
    return Envelope(data=[UserOut.model_validate(u) for u in users])


@router.get("/me", response_model=Envelope)
def get_me(user: User = Depends(get_current_user)):
    return Envelope(data=UserOut.model_validate(user))


@router.get("/by_id", response_model=Envelope)
def get_user_by_id(user_id: str, db: Session = Depends(get_db)):
    return Envelope(data=UserOut.model_validate(auth_service.get_user(db, user_id)))


@router.put("/update", response_model=Envelope)
def update_me(
    payload: UserUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    # 본인 계정만 수정 가능 (대상은 토큰의 사용자)
    updated = auth_service.update_user(db, user, payload)
    return Envelope(message="User updated successfully", data=UserOut.model_validate(updated))
