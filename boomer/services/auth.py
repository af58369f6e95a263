# ------------------------------------------------------------
# auth.py — 회원가입/로그인, JWT 발급·검증, 로그인 사용자 의존성
# ------------------------------------------------------------

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from ..config import JWT_ALGORITHM, JWT_EXPIRE_MINUTES, JWT_SECRET_KEY
from ..db import get_db
from ..errors import BadRequestError, ForbiddenError, NotFoundError, UnauthorizedError
from ..models import User
from ..repositories import users as user_repo
from ..schemas import SignupIn, UserUpdate

logger = logging.getLogger(__name__)

# auto_error=False: 토큰이 없을 때 403 대신 우리 쪽 401 envelope로 응답
bearer = HTTPBearer(auto_error=False)


def create_token(user: User) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user.user_id,
        "iat": now,
        "exp": now + timedelta(minutes=JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> str:
    """토큰을 검증하고 user_id(sub)를 돌려준다."""
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token")
    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError("Invalid token")
    return user_id


def user_from_token(db: Session, token: Optional[str]) -> User:
    if not token:
        raise UnauthorizedError("Not authenticated")
    user = user_repo.get_user(db, decode_token(token))
    if user is None:
        raise UnauthorizedError("can not find user")
    if user.suspended or not user.isActive:
        raise ForbiddenError("Account is suspended or inactive")
    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    """보호된 라우트에서 Depends(get_current_user)로 로그인 사용자를 주입받는다."""
    return user_from_token(db, credentials.credentials if credentials else None)


def signup(db: Session, payload: SignupIn) -> User:
    if user_repo.get_by_email(db, payload.email) is not None:
        raise BadRequestError("User with this email already exists")

    # user_id = user_name + 랜덤 접미사
    user_id = f"{payload.user_name}{secrets.token_hex(5)}"
    user = user_repo.create_user(
        db,
        user_id=user_id,
        user_name=payload.user_name,
        email=payload.email,
        password_hash=generate_password_hash(payload.password),
    )
    logger.info("user %s signed up", user.user_id)
    return user


def login(db: Session, email: str, password: str) -> User:
    user = user_repo.get_by_email(db, email)
    if user is None:
        raise NotFoundError(f"No user found for email: {email}")
    if not check_password_hash(user.password, password):
        raise UnauthorizedError("invalid credentials")
    return user


def get_user(db: Session, user_id: str) -> User:
    user = user_repo.get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def list_users(db: Session, skip: int = 0, limit: int = 100) -> List[User]:
    return user_repo.list_users(db, skip=skip, limit=limit)


def update_user(db: Session, user: User, payload: UserUpdate) -> User:
    fields = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in fields and fields["email"] != user.email:
        if user_repo.get_by_email(db, fields["email"]) is not None:
            raise BadRequestError("User with this email already exists")
    if "password" in fields:
        fields["password"] = generate_password_hash(fields["password"])
    return user_repo.update_user(db, user, fields)
