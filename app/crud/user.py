# app/crud/user.py
import logging
import uuid
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.auth import get_user_manager
from app.core.db_utils import atomic
from app.core.exceptions import StorageError, ValidationError
from app.models.user import User
from app.schemas.user import UserSettingsUpdate

logger = logging.getLogger(__name__)

async def get_user_by_id(user_id: uuid.UUID, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalars().first()

async def update_user_settings(user: User, settings_in: UserSettingsUpdate, db: AsyncSession) -> User:
    # Create update dictionary, excluding fields the client did not send
    update_dict = settings_in.model_dump(exclude_unset=True)
    # avatar_url may be cleared with null, the other two columns are NOT NULL
    for field in ("theme_color", "is_dark_mode"):
        if field in update_dict and update_dict[field] is None:
            update_dict.pop(field)
    if not update_dict:
        raise ValidationError("No fields provided for update")

    async with atomic(db, "update user settings"):
        await db.execute(
            update(User)
            .where(User.id == user.id)
            .values(**update_dict)
            .execution_options(synchronize_session=False)
        )

    result = await db.execute(
        select(User).where(User.id == user.id).execution_options(populate_existing=True)
    )
    return result.scalars().first()

async def delete_user(user: User, db: AsyncSession) -> None:
    """Delete the user; accounts and their transactions go with it."""
    user_manager = get_user_manager(db)
    try:
        await user_manager.delete(user)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error while deleting user {user.id}: {str(e)}")
        raise StorageError() from e
