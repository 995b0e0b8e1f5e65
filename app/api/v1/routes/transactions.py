# app/api/v1/routes/transactions.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.database import get_async_session
from app.crud.transaction import (
    delete_transaction,
    list_recent_transactions,
    record_transaction,
    summarize_by_category,
)
from app.models.user import User
from app.schemas.transaction import (
    CategoryTotal,
    TransactionCreate,
    TransactionCreated,
    TransactionDeleted,
    TransactionKind,
    TransactionRead,
    TransactionView,
)

router = APIRouter(prefix="/transactions", tags=["transactions"])

@router.get("", response_model=List[TransactionView])
async def read_transactions(
    limit: Optional[int] = Query(None, ge=1, le=500, description="Newest N entries; all when omitted"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await list_recent_transactions(user.id, db, limit=limit)

@router.get("/summary", response_model=List[CategoryTotal])
async def read_category_summary(
    kind: Optional[TransactionKind] = Query(None, alias="type"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Totals per category, the data behind the dashboard charts."""
    return await summarize_by_category(user.id, db, kind=kind)

@router.post("", response_model=TransactionCreated, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    tx_in: TransactionCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    tx, new_balance = await record_transaction(user.id, tx_in, db)
    return TransactionCreated(
        message="Transaction recorded",
        newBalance=new_balance,
        transaction=TransactionRead.model_validate(tx),
    )

@router.delete("/{transaction_id}", response_model=TransactionDeleted)
async def delete_transaction_endpoint(
    transaction_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    new_balance = await delete_transaction(user.id, transaction_id, db)
    return TransactionDeleted(message="Transaction deleted", newBalance=new_balance)
