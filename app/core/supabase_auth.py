# app/core/supabase_auth.py
import uuid
import logging
from typing import Dict, Optional, Tuple

import httpx
from fastapi import status
from fastapi_users import exceptions
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import SessionIssuer, UserDatabase
from app.core.config import settings
from app.core.exceptions import AppError, AuthError, ConflictError
from app.core.security import decode_access_token
from app.crud.user import get_user_by_id
from app.models.user import User

logger = logging.getLogger(__name__)

# Supabase access tokens are issued for this audience
SUPABASE_AUDIENCE = "authenticated"

class SupabaseSessionIssuer(SessionIssuer):
    """
    Delegates passwords to Supabase Auth (GoTrue).

    Supabase owns the credentials; we keep a users row with the same id so
    accounts and settings have an owner. Tokens are Supabase access tokens,
    verified locally with the project's JWT secret.
    """

    name = "supabase"

    def __init__(
        self,
        url: str,
        anon_key: str,
        jwt_secret: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not url or not anon_key or not jwt_secret:
            raise RuntimeError("SUPABASE_URL, SUPABASE_ANON_KEY and SUPABASE_JWT_SECRET must be set")
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.jwt_secret = jwt_secret
        self.transport = transport

    @classmethod
    def from_settings(cls) -> "SupabaseSessionIssuer":
        return cls(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY, settings.SUPABASE_JWT_SECRET)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self.url}/auth/v1",
            headers={"apikey": self.anon_key, "Authorization": f"Bearer {self.anon_key}"},
            transport=self.transport,
            timeout=10.0,
        )

    async def _post(self, path: str, payload: Dict, params: Optional[Dict] = None) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.post(path, json=payload, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Supabase Auth request {path} failed: {str(e)}")
            raise AppError("Authentication provider unavailable", status.HTTP_502_BAD_GATEWAY)

    @staticmethod
    def _provider_message(response: httpx.Response, fallback: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return fallback
        return body.get("msg") or body.get("error_description") or body.get("message") or fallback

    async def _ensure_local_user(self, user_id: uuid.UUID, email: str, db: AsyncSession) -> User:
        user = await get_user_by_id(user_id, db)
        if user is not None:
            return user
        user_db = UserDatabase(db, User)
        try:
            user = await user_db.create({
                "id": user_id,
                "email": email,
                "hashed_password": "",
                "is_verified": True,
            })
        except exceptions.UserAlreadyExists:
            # Email is held by a row under another id (local signup, or a recreated provider identity)
            logger.warning(f"Supabase user {user_id} collides with an existing local profile for {email}")
            raise ConflictError()
        logger.info(f"Created local profile for Supabase user {email}")
        return user

    async def register(self, email: str, password: str, db: AsyncSession) -> User:
        response = await self._post("/signup", {"email": email, "password": password})
        if response.status_code >= 400:
            message = self._provider_message(response, "Registration failed")
            logger.info(f"Supabase refused registration of {email}: {message}")
            raise ConflictError(message)

        data = response.json()
        # GoTrue answers with the user, or with a session wrapping it when autoconfirm is on
        provider_user = data.get("user") or data
        return await self._ensure_local_user(uuid.UUID(provider_user["id"]), email, db)

    async def authenticate(self, email: str, password: str, db: AsyncSession) -> Tuple[str, User]:
        response = await self._post(
            "/token",
            {"email": email, "password": password},
            params={"grant_type": "password"},
        )
        if response.status_code >= 400:
            logger.info(f"Failed Supabase login attempt for {email}")
            raise AuthError("Invalid credentials", status.HTTP_400_BAD_REQUEST)

        data = response.json()
        provider_user = data["user"]
        user = await self._ensure_local_user(
            uuid.UUID(provider_user["id"]),
            provider_user.get("email") or email,
            db,
        )
        return data["access_token"], user

    def verify(self, token: str) -> uuid.UUID:
        return decode_access_token(token, secret=self.jwt_secret, audience=SUPABASE_AUDIENCE)
