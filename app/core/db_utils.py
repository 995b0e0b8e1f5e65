"""
Database utilities for unit-of-work management and error handling
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def atomic(db: AsyncSession, operation: str) -> AsyncIterator[AsyncSession]:
    """
    Run a group of writes as one all-or-nothing unit.

    Commits when the block exits cleanly. Any exception rolls the session
    back; database errors are logged and re-raised as StorageError so that
    no driver detail reaches the client. Nothing is retried.

    Args:
        db: The request's session
        operation: Short label used in log lines

    Usage:
        async with atomic(db, "record transaction"):
            db.add(tx)
            await adjust_balance(...)
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error during {operation}: {str(e)}")
        raise StorageError() from e
    except Exception:
        await db.rollback()
        raise
