"""
Admin credential and token helpers
bcrypt password hashes via passlib, HS256 session tokens via python-jose
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError
from jose import jwt as jose_jwt
from passlib.context import CryptContext

from .config import ADMIN_TOKEN_EXPIRE_HOURS, SECRET_KEY

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored bcrypt hash; malformed hashes never match"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification error: {e}")
        return False


def constant_time_compare(a: str, b: str) -> bool:
    return secrets.compare_digest(a.encode(), b.encode())


def create_admin_token(subject: str, role: str = "admin", expires_delta: Optional[timedelta] = None) -> str:
    """Signed admin session token, valid for ADMIN_TOKEN_EXPIRE_HOURS by default"""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=ADMIN_TOKEN_EXPIRE_HOURS))
    return jose_jwt.encode({"sub": subject, "role": role, "exp": expire}, SECRET_KEY, algorithm=ALGORITHM)


def verify_admin_token(token: str) -> Optional[dict[str, Any]]:
    """Claims of a valid, unexpired admin token; None for anything else"""
    try:
        claims = jose_jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"⚠️ Rejected admin token: {e}")
        return None
    return claims if claims.get("role") == "admin" else None
