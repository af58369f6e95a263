import secrets
import time
from datetime import datetime, timezone


def new_id(nbytes: int = 8) -> str:
    """
    시간순 정렬이 가능한 불투명 식별자를 만든다.
    - 앞 12자리: 밀리초 타임스탬프(hex), 뒤: 랜덤 hex
    """
    return f"{int(time.time() * 1000):012x}{secrets.token_hex(nbytes)}"


def utcnow() -> datetime:
    # DB(MySQL/SQLite/Mongo) 모두 naive UTC로 저장
    return datetime.now(timezone.utc).replace(tzinfo=None)
