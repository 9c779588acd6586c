# File: /app/routers/auth.py | Version: 3.0 | Title: Auth Router (JSON+form tolerant) + Access & Refresh Tokens
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.db.session import get_db, transactional
from app.models.core_entities import User
from app.schemas.auth import RefreshRequest, TokenResponse
from app.schemas.user import UserResponse
from app.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    get_current_user,
    get_password_hash,
    verify_password,
)

router = APIRouter(prefix="/auth", tags=["Auth"])


# ---------------------------
# Utilities
# ---------------------------


async def _read_json_or_form(request: Request) -> Dict[str, Any]:
    """Accept JSON or form-encoded bodies and normalize keys."""
    ctype = (request.headers.get("content-type") or "").lower()
    data: Dict[str, Any] = {}
    if "json" in ctype:
        try:
            body = await request.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            data = body
    else:
        form = await request.form()
        data = dict(form)

    # alias: username -> email (OAuth-style)
    if "username" in data and "email" not in data:
        data["email"] = data["username"]
    return data


def _credentials(payload: Dict[str, Any]) -> tuple[str, Optional[str]]:
    email = (payload.get("email") or "").strip().lower()
    password = payload.get("password")
    if not email or not password:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Email and password required",
        )
    return email, password


def _authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )
    return user


def _issue_tokens_for_user(user: User) -> TokenResponse:
    sub = {"sub": str(user.id)}
    return TokenResponse(
        access_token=create_access_token(sub),
        refresh_token=create_refresh_token(sub),
    )


# ---------------------------
# Endpoints
# ---------------------------


@router.post("/register", response_model=UserResponse)
async def register(request: Request, db: Session = Depends(get_db)):
    """
    Register a user. Idempotent: an existing email returns the existing user.
    Accepts JSON or form {email, password, [full_name]}.
    """
    payload = await _read_json_or_form(request)
    email, password = _credentials(payload)

    with transactional(db):
        user = db.query(User).filter(User.email == email).first()
        if not user:
            user = User(
                email=email,
                full_name=payload.get("full_name"),
                hashed_password=get_password_hash(password),
                is_active=True,
            )
            db.add(user)
            db.flush()
        result = UserResponse.model_validate(user)
    return result


@router.post("/login", response_model=TokenResponse)
async def login(request: Request, db: Session = Depends(get_db)):
    """Login with JSON or form {email/username, password}."""
    payload = await _read_json_or_form(request)
    email, password = _credentials(payload)
    return _issue_tokens_for_user(_authenticate(db, email, password))


@router.post("/token", response_model=TokenResponse)
def login_oauth_form(
    db: Session = Depends(get_db),
    username: str = Form(...),
    password: str = Form(...),
):
    """OAuth2 form variant used by the OpenAPI "Authorize" button."""
    return _issue_tokens_for_user(_authenticate(db, (username or "").strip().lower(), password))


@router.post("/refresh", response_model=TokenResponse)
def refresh(data: RefreshRequest, db: Session = Depends(get_db)):
    claims = decode_token(data.refresh_token, "refresh")
    user = db.get(User, claims.get("sub")) if claims.get("sub") else None
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Could not validate credentials")
    return _issue_tokens_for_user(user)


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
