from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import uuid

from jose import jwt

from campus_notify.core.config import settings
from campus_notify.core.constants import UserTypeEnum


def create_access_token(*, user_id: int, user_type: UserTypeEnum, expires_delta: Optional[timedelta] = None) -> str:
    """Mint a bearer token carrying the actor claims read by deps.get_current_actor.

    Tokens are normally issued by the campus identity service; this helper
    exists for operators and the test-suite.
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": str(user_id),
        "user_type": UserTypeEnum(user_type).value,
        "exp": expire,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
