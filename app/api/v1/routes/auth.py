# app/api/v1/routes/auth.py
import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_session_issuer
from app.core.auth import SessionIssuer
from app.core.database import get_async_session
from app.schemas.user import Credentials, LoginResponse, Message, RegisterResponse, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])

@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    credentials: Credentials,
    db: AsyncSession = Depends(get_async_session),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """Create a user together with the default Cash and Card accounts."""
    user = await issuer.register(credentials.email, credentials.password, db)
    return RegisterResponse(message="Registration successful", user=UserRead.model_validate(user))

@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: Credentials,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    token, user = await issuer.authenticate(credentials.email, credentials.password, db)
    logger.info(f"User {user.email} logged in via {issuer.name} issuer. Token: {token[:10]}...")

    response.set_cookie(
        key="access_token",
        value=token,
        max_age=issuer.token_lifetime_seconds,
        httponly=True,
        samesite="lax",
    )
    return LoginResponse(
        message="Login successful",
        token=token,
        expires_in=issuer.token_lifetime_seconds,
        user=UserRead.model_validate(user),
    )

@router.post("/logout", response_model=Message)
async def logout(response: Response):
    """
    Logout endpoint that doesn't require authentication.
    Tokens are stateless; this only clears the access token cookie if present.
    """
    response.delete_cookie(key="access_token")
    return {"message": "Successfully logged out"}
