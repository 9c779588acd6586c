# File: /app/schemas/auth.py | Version: 3.0 | Path: /app/schemas/auth.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
