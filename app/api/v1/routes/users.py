# app/api/v1/routes/users.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.database import get_async_session
from app.crud.user import delete_user, update_user_settings
from app.models.user import User
from app.schemas.user import Message, UserRead, UserSettingsResponse, UserSettingsUpdate

router = APIRouter(prefix="/user", tags=["User Management"])

# 1) GET /user/me
@router.get("/me", response_model=UserRead)
async def read_own_profile(user: User = Depends(get_current_user)):
    """Get current user's profile"""
    return user

# 2) PUT /user/settings
@router.put("/settings", response_model=UserSettingsResponse)
async def update_own_settings(
    settings_in: UserSettingsUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Update avatar, theme color and dark mode"""
    updated_user = await update_user_settings(user, settings_in, db)
    return UserSettingsResponse(message="Settings saved", user=UserRead.model_validate(updated_user))

# 3) DELETE /user/delete
@router.delete("/delete", response_model=Message)
async def delete_own_profile(
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Delete current user's account permanently, with all wallets and transactions"""
    await delete_user(user, db)
    response.delete_cookie(key="access_token")
    return {"message": "Account deleted"}
