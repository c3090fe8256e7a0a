# webapp/api/account.py

import asyncio
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, field_validator
from typing import Dict, Optional

from database.db_manager import DatabaseManager
from resume.errors import AuthError, ValidationError
from resume.security import is_valid_email, validate_password_strength
from webapp.auth import create_access_token, get_optional_user, hash_password, verify_password
from webapp.deps import get_db, rate_limit

router = APIRouter()
logger = logging.getLogger(__name__)


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not is_valid_email(value):
            raise ValueError("Please enter a valid email address")
        return value

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        is_valid, message = validate_password_strength(value)
        if not is_valid:
            raise ValueError(message)
        return value

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class LoginRequest(BaseModel):
    email: str
    password: str


def serialize_user(user: Dict) -> Dict:
    return {
        "id": user['user_id'],
        "email": user['email'],
        "name": user.get('name'),
        "isPro": user['is_pro'],
        "resumeCount": user['resume_count'],
    }


def _session_response(request: Request, user: Dict, status_code: int) -> JSONResponse:
    """JSON response carrying the session cookie for `user`"""
    settings = request.app.state.settings
    access_token = create_access_token(
        data={"sub": user['user_id'], "email": user['email']},
        settings=settings
    )

    response = JSONResponse({"user": serialize_user(user)}, status_code=status_code)
    response.set_cookie(
        key=settings.cookie_name,
        value=access_token,
        httponly=True,
        max_age=settings.session_expire_hours * 3600,
        samesite="lax",
        secure=settings.cookie_secure
    )
    return response


@router.post("/auth/register", dependencies=[Depends(rate_limit("auth"))])
async def register(
    request: Request,
    payload: RegisterRequest,
    db: DatabaseManager = Depends(get_db)
) -> JSONResponse:
    """Create an account and start a session"""
    existing = await asyncio.to_thread(db.get_user_by_email, payload.email)
    if existing:
        raise ValidationError("An account with this email already exists.")

    user = await asyncio.to_thread(
        db.create_user, payload.email, hash_password(payload.password), payload.name
    )
    return _session_response(request, user, status_code=201)


@router.post("/auth/login", dependencies=[Depends(rate_limit("auth"))])
async def login(
    request: Request,
    payload: LoginRequest,
    db: DatabaseManager = Depends(get_db)
) -> JSONResponse:
    """Handle login"""
    user = await asyncio.to_thread(db.get_user_by_email, payload.email.strip().lower())
    if not user or not verify_password(payload.password, user['password_hash']):
        logger.info(f"Failed login for {payload.email}")
        raise AuthError("Invalid email or password.")

    return _session_response(request, user, status_code=200)


@router.post("/auth/logout")
async def logout(request: Request) -> JSONResponse:
    """Logout user"""
    response = JSONResponse({"success": True})
    response.delete_cookie(request.app.state.settings.cookie_name)
    return response


@router.get("/me")
async def me(request: Request, db: DatabaseManager = Depends(get_db)) -> Dict:
    """Current account, or null when not logged in"""
    session = get_optional_user(request)
    user: Optional[Dict] = None
    if session:
        user = await asyncio.to_thread(db.get_user, session["user_id"])

    return {"user": serialize_user(user) if user else None}
