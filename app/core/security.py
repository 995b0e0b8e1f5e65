# app/core/security.py
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import status
from fastapi_users.password import PasswordHelper
from pwdlib import PasswordHash
from pwdlib.hashers.bcrypt import BcryptHasher

from .config import settings
from .exceptions import AuthError

# bcrypt only, cost factor 12
password_helper = PasswordHelper(PasswordHash((BcryptHasher(rounds=12),)))

def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token for the given subject (user ID)
    """
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": subject, "exp": expire, "iat": now}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_access_token(
    token: str,
    secret: Optional[str] = None,
    audience: Optional[str] = None,
) -> uuid.UUID:
    """
    Verify signature and expiry and return the user id stored in ``sub``.

    Raises AuthError (403) for expired, tampered or malformed tokens.
    """
    try:
        payload = jwt.decode(
            token,
            secret or settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=audience,
            options={"verify_aud": audience is not None},
        )
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired", status.HTTP_403_FORBIDDEN)
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token", status.HTTP_403_FORBIDDEN)

    user_id_str = payload.get("sub")
    if not user_id_str:
        raise AuthError("Invalid token: missing user ID", status.HTTP_403_FORBIDDEN)
    try:
        return uuid.UUID(str(user_id_str))
    except ValueError:
        raise AuthError("Invalid user ID format in token", status.HTTP_403_FORBIDDEN)
