# File: /app/security.py | Version: 2.0 | Title: JWT bearer security (access + refresh) and identity extraction
from datetime import UTC, datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db
from app.models import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer scheme shown in OpenAPI as "jwt"; tokens come from the form-based endpoint
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", scheme_name="jwt")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def _issue(claims: dict, token_type: str, expires: timedelta) -> str:
    to_encode = dict(claims)
    to_encode.update({"exp": datetime.now(UTC) + expires, "type": token_type})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    return _issue(
        data, "access", expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )


def create_refresh_token(data: dict, expires_minutes: Optional[int] = None) -> str:
    minutes = expires_minutes or settings.REFRESH_TOKEN_EXPIRE_MINUTES
    return _issue(data, "refresh", timedelta(minutes=minutes))


def decode_token(token: str, expected_type: str) -> dict:
    """Raises 401 for bad signatures, expiry, or the wrong token type."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    # Tokens without a type claim are treated as access tokens
    if payload.get("type", "access") != expected_type:
        raise HTTPException(status_code=401, detail="Invalid token type")
    return payload


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    payload = decode_token(token, "access")
    user_id: Optional[str] = payload.get("sub")
    user = db.get(User, user_id) if user_id else None
    if not user or not getattr(user, "is_active", True):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_identity(current_user: User = Depends(get_current_user)) -> str:
    """The authenticated identity id, passed explicitly into ownership checks."""
    return str(current_user.id)
