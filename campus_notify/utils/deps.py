from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session
from campus_notify.core.constants import UserTypeEnum
from campus_notify.core.database import SessionLocal
from campus_notify.core.security import decode_access_token
from campus_notify.crud import user as crud_user
from campus_notify.schemas.user import Actor

http_bearer = HTTPBearer(auto_error=False)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_transactional_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def get_current_actor(
    request: Request,
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials = Depends(http_bearer)
) -> Actor:
    """Resolve the bearer token into the calling (user_id, user_type) once per request."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_access_token(credentials.credentials)
        actor = Actor(user_id=payload.get("sub"), user_type=payload.get("user_type"))
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    account = crud_user.get_account(db, user_id=actor.user_id, user_type=actor.user_type)
    if not account or not account.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive"
        )
    request.state.actor = actor
    return actor

def require_user_type(*allowed: UserTypeEnum):
    """Dependency factory: only the listed kinds of user may call the endpoint."""
    allowed_values = {UserTypeEnum(a).value for a in allowed}

    def _verify_user_type(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.user_type not in allowed_values:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action."
            )
        return actor
    return _verify_user_type
