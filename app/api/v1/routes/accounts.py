# app/api/v1/routes/accounts.py
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.database import get_async_session
from app.crud.account import list_accounts
from app.models.user import User
from app.schemas.account import AccountRead

router = APIRouter(prefix="/accounts", tags=["accounts"])

@router.get("", response_model=List[AccountRead])
async def read_accounts(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await list_accounts(user.id, db)
