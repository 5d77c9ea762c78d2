"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes
"""

import secrets
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pymongo.database import Database

from hirehub.core.config import get_settings
from hirehub.core.errors import ForbiddenError, NotFoundError, UnauthorizedError
from hirehub.db.mongodb import COLLECTIONS, get_database
from hirehub.services.mongo_service import parse_object_id

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor (missing header is handled here, not by FastAPI)
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def generate_token() -> str:
    """Random URL-safe token for email verification and password reset."""
    return secrets.token_urlsafe(32)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def _load_user(db: Database, token: str) -> dict:
    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        raise UnauthorizedError("Invalid or expired token")

    try:
        user_id = parse_object_id(payload["sub"], "User")
    except NotFoundError:
        raise UnauthorizedError("Invalid or expired token")

    user = db[COLLECTIONS["users"]].find_one({"_id": user_id})
    if not user:
        raise UnauthorizedError("Invalid or expired token")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Database = Depends(get_database),
) -> dict:
    """
    FastAPI dependency - Get current authenticated user document.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    if credentials is None:
        raise UnauthorizedError()
    return _load_user(db, credentials.credentials)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Database = Depends(get_database),
) -> Optional[dict]:
    """Dependency - current user when a valid token is sent, None otherwise."""
    if credentials is None:
        return None
    try:
        return _load_user(db, credentials.credentials)
    except UnauthorizedError:
        return None


async def require_candidate(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require candidate role."""
    if user.get("role") != "candidate":
        raise ForbiddenError("Candidates only")
    return user


async def require_recruiter(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require recruiter role."""
    if user.get("role") != "recruiter":
        raise ForbiddenError("Recruiters only")
    return user
