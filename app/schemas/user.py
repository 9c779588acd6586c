# File: /app/schemas/user.py | Version: 3.0 | Path: /app/schemas/user.py
from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict


class UserResponse(BaseModel):
    id: str
    email: str
    full_name: str | None = None

    # Pydantic v2 style
    model_config = ConfigDict(from_attributes=True)
