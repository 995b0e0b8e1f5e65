# app/api/deps.py
from functools import lru_cache
from typing import Optional
from fastapi import Depends, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import LocalSessionIssuer, SessionIssuer
from app.core.config import settings
from app.core.database import get_async_session
from app.core.exceptions import AuthError
from app.crud.user import get_user_by_id
from app.models.user import User

# Security scheme; missing headers are reported by get_current_user, not by FastAPI
optional_security = HTTPBearer(auto_error=False)

@lru_cache
def get_session_issuer() -> SessionIssuer:
    """The issuer named by AUTH_PROVIDER; built once per process."""
    if settings.AUTH_PROVIDER == "supabase":
        from app.core.supabase_auth import SupabaseSessionIssuer
        return SupabaseSessionIssuer.from_settings()
    return LocalSessionIssuer()

async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    issuer: SessionIssuer = Depends(get_session_issuer),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> User:
    """
    Guard for every protected route:
    - Authorization header (Bearer)
    - access_token cookie set by /login
    Missing token is 401, an invalid or expired one is 403.
    """
    token = None
    if credentials and credentials.credentials:
        token = credentials.credentials

    # From cookie
    if not token:
        token = request.cookies.get("access_token")
        # Remove "Bearer " prefix if present in cookie
        if token and token.startswith("Bearer "):
            token = token[7:]

    if not token:
        raise AuthError("Not authenticated", status.HTTP_401_UNAUTHORIZED)

    user_id = issuer.verify(token)

    user = await get_user_by_id(user_id, db)
    if user is None:
        raise AuthError("User not found", status.HTTP_401_UNAUTHORIZED)
    if user.is_active is False:
        raise AuthError("Inactive user", status.HTTP_401_UNAUTHORIZED)
    return user
