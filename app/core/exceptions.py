"""
Error taxonomy shared by the ledger, the recorder and the session issuers.

Every error carries the HTTP status it is reported with; the handlers in
app/main.py turn them into ``{"error": message}`` responses.
"""
from typing import Optional

from fastapi import status


class AppError(Exception):
    """Base exception for all expected failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "Request failed"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""

    message = "Invalid request"


class AuthError(AppError):
    """Bad credentials, or a missing/invalid bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authenticated"


class OwnershipError(AppError):
    """Resource is missing or belongs to another user."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class ConflictError(AppError):
    """Attempted to register an identity that already exists."""

    message = "User with this email already exists"


class StorageError(AppError):
    """Any failure raised by the database layer. Never carries driver detail."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server error"
