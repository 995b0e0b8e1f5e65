# app/core/auth.py

import uuid
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from fastapi import Request, status
from fastapi.security import OAuth2PasswordRequestForm
from fastapi_users import BaseUserManager, UUIDIDMixin, exceptions
from fastapi_users.db import SQLAlchemyUserDatabase
from pwdlib.exceptions import UnknownHashError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .config import settings
from .exceptions import AuthError, ConflictError, StorageError, ValidationError
from .security import create_access_token, decode_access_token, password_helper
from app.crud.account import create_default_accounts
from app.models.user import User
from app.schemas.user import UserCreate

logger = logging.getLogger(__name__)

# 1. User Database: every user row is committed together with its default wallets
class UserDatabase(SQLAlchemyUserDatabase):
    async def create(self, create_dict: Dict[str, Any]) -> User:
        create_dict = dict(create_dict)
        create_dict.setdefault("accounts", create_default_accounts())
        try:
            return await super().create(create_dict)
        except IntegrityError:
            await self.session.rollback()
            raise exceptions.UserAlreadyExists()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Database error while creating user {create_dict.get('email')}: {str(e)}")
            raise StorageError() from e

# 2. User Manager
class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.SECRET_KEY
    verification_token_secret = settings.SECRET_KEY

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        logger.info(f"User {user.email} has registered with default accounts")

    async def on_after_delete(self, user: User, request: Optional[Request] = None):
        logger.info(f"User {user.email} deleted together with accounts and transactions")

def get_user_manager(db: AsyncSession) -> UserManager:
    return UserManager(UserDatabase(db, User), password_helper)

# 3. Session issuers
class SessionIssuer(ABC):
    """
    Registers users, trades credentials for a bearer token and turns a token
    back into a user id.

    The ledger never looks past this interface, so the local issuer and a
    delegated provider are interchangeable.
    """

    name: str = "abstract"

    @property
    def token_lifetime_seconds(self) -> int:
        return settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    @abstractmethod
    async def register(self, email: str, password: str, db: AsyncSession) -> User:
        """
        Create the identity and its local user row (with default accounts).

        Raises:
            ConflictError: the email is already registered
            ValidationError: the provider rejected the password
        """

    @abstractmethod
    async def authenticate(self, email: str, password: str, db: AsyncSession) -> Tuple[str, User]:
        """
        Returns:
            (token, user)

        Raises:
            AuthError: unknown email or wrong password
        """

    @abstractmethod
    def verify(self, token: str) -> uuid.UUID:
        """
        Raises:
            AuthError: token malformed, tampered with or expired
        """

class LocalSessionIssuer(SessionIssuer):
    """bcrypt password hashes in our own users table, HS256 JWTs signed with SECRET_KEY."""

    name = "local"

    async def register(self, email: str, password: str, db: AsyncSession) -> User:
        user_manager = get_user_manager(db)
        try:
            return await user_manager.create(UserCreate(email=email, password=password))
        except exceptions.UserAlreadyExists:
            logger.info(f"Registration refused, {email} already exists")
            raise ConflictError()
        except exceptions.InvalidPasswordException as e:
            raise ValidationError(str(e.reason))

    async def authenticate(self, email: str, password: str, db: AsyncSession) -> Tuple[str, User]:
        user_manager = get_user_manager(db)
        credentials = OAuth2PasswordRequestForm(username=email, password=password)
        try:
            user = await user_manager.authenticate(credentials)
        except UnknownHashError:
            # Row created by an external provider; there is no local password
            user = None

        if user is None or not user.is_active:
            logger.info(f"Failed login attempt for {email}")
            raise AuthError("Invalid credentials", status.HTTP_400_BAD_REQUEST)

        return create_access_token(str(user.id)), user

    def verify(self, token: str) -> uuid.UUID:
        return decode_access_token(token)

# Export for other modules
__all__ = [
    "UserDatabase",
    "UserManager",
    "get_user_manager",
    "SessionIssuer",
    "LocalSessionIssuer",
]
