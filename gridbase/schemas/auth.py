# File: /gridbase/schemas/auth.py | Version: 1.0 | Path: /gridbase/schemas/auth.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserOut(BaseModel):
    id: str
    email: str
    full_name: str | None = None

    model_config = ConfigDict(from_attributes=True)
