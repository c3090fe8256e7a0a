# webapp/auth.py

from datetime import datetime, timedelta
from typing import Optional
from fastapi import Request
from jose import JWTError, jwt
from passlib.context import CryptContext

from resume.errors import AdminRequired, AuthError
from webapp.config import Settings

# Password hashing
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# JWT settings
ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify password against stored hash"""
    return pwd_context.verify(plain_password, password_hash)


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(hours=settings.session_expire_hours)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)
    return encoded_jwt


def verify_token(token: str, settings: Settings) -> dict:
    """Verify JWT token"""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        raise AuthError("Invalid or expired token")


def _token_from_request(request: Request, settings: Settings) -> Optional[str]:
    token = request.cookies.get(settings.cookie_name)
    if token:
        return token

    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


async def get_current_user(request: Request) -> dict:
    """Dependency to get current authenticated user"""
    settings: Settings = request.app.state.settings
    token = _token_from_request(request, settings)

    if not token:
        raise AuthError()

    payload = verify_token(token, settings)
    user_id = payload.get("sub")
    if not user_id:
        raise AuthError("Invalid or expired token")

    return {"user_id": user_id, "email": payload.get("email")}


def get_optional_user(request: Request) -> Optional[dict]:
    """Get user if authenticated, None otherwise"""
    settings: Settings = request.app.state.settings
    token = _token_from_request(request, settings)
    if not token:
        return None

    try:
        payload = verify_token(token, settings)
    except AuthError:
        return None

    if not payload.get("sub"):
        return None
    return {"user_id": payload["sub"], "email": payload.get("email")}


async def require_admin(request: Request) -> dict:
    """Dependency that only lets the configured admin account through"""
    user = await get_current_user(request)
    if user.get("email") != request.app.state.settings.admin_email:
        raise AdminRequired()
    return user
