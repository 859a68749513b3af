# File: /gridbase/routers/auth.py | Version: 1.0 | Title: Auth Router (JSON+form tolerant) + Access Tokens
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from gridbase.core.exceptions import Conflict
from gridbase.db.session import get_db
from gridbase.models import User
from gridbase.schemas.auth import TokenResponse, UserOut
from gridbase.security import (
    create_access_token,
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
    if "application/json" in ctype:
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


def _credentials(payload: Dict[str, Any]) -> tuple[str, str]:
    email = str(payload.get("email") or "").strip().lower()
    password = payload.get("password")
    if not email or not password:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Email and password required",
        )
    return email, str(password)


def _find_user(db: Session, email: str) -> Optional[User]:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def _authenticate(db: Session, email: str, password: str) -> TokenResponse:
    user = _find_user(db, email)
    if not user or not verify_password(password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )
    return TokenResponse(access_token=create_access_token({"sub": str(user.id)}))


# ---------------------------
# Endpoints
# ---------------------------


@router.post("/register", response_model=UserOut)
async def register(request: Request, db: Session = Depends(get_db)):
    """
    Register a user. Accepts JSON or form {email, password, [full_name]}.
    Registering again with the same credentials returns the existing user;
    a different password for a known email is a conflict.
    """
    payload = await _read_json_or_form(request)
    email, password = _credentials(payload)
    full_name: Optional[str] = payload.get("full_name")

    user = _find_user(db, email)
    if user is not None:
        if not verify_password(password, user.hashed_password):
            raise Conflict("Email already registered")
        return user

    user = User(
        email=email,
        full_name=full_name,
        hashed_password=get_password_hash(password),
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.post("/login", response_model=TokenResponse)
async def login(request: Request, db: Session = Depends(get_db)):
    """Login with JSON or form {email/username, password}."""
    payload = await _read_json_or_form(request)
    email, password = _credentials(payload)
    return _authenticate(db, email, password)


@router.post("/token", response_model=TokenResponse)
def login_oauth_form(
    db: Session = Depends(get_db),
    username: str = Form(...),
    password: str = Form(...),
):
    """OAuth2 form variant (used by the OpenAPI 'Authorize' button and tests)."""
    return _authenticate(db, (username or "").strip().lower(), password)


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
