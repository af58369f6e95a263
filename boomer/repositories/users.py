from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import User


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)


def list_users(db: Session, skip: int = 0, limit: int = 100) -> List[User]:
    return db.query(User).order_by(User.created_at.desc()).offset(skip).limit(limit).all()


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).one_or_none()


def create_user(db: Session, user_id: str, user_name: str, email: str, password_hash: str) -> User:
    user = User(user_id=user_id, user_name=user_name, email=email, password=password_hash, interests=[])
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user: User, fields: dict) -> User:
    for key, value in fields.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user
