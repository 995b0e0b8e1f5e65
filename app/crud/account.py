# app/crud/account.py
import logging
import uuid
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.config import settings
from app.core.exceptions import OwnershipError
from app.models.account import Account

logger = logging.getLogger(__name__)

def create_default_accounts() -> List[Account]:
    """Fresh, unsaved wallets for a new user (attach them to the User before commit)."""
    return [Account(name=name, balance=Decimal("0.00")) for name in settings.DEFAULT_ACCOUNT_NAMES]

async def list_accounts(user_id: uuid.UUID, db: AsyncSession) -> List[Account]:
    result = await db.execute(
        select(Account).where(Account.user_id == user_id).order_by(Account.id)
    )
    return result.scalars().all()

async def get_account(
    account_id: int,
    user_id: uuid.UUID,
    db: AsyncSession,
    for_update: bool = False,
) -> Optional[Account]:
    query = select(Account).where(Account.id == account_id, Account.user_id == user_id)
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    return result.scalar_one_or_none()

async def adjust_balance(
    account_id: int,
    user_id: uuid.UUID,
    delta: Decimal,
    db: AsyncSession,
) -> Account:
    """
    Add ``delta`` to the balance of an account owned by ``user_id``.

    The ownership predicate lives in the same UPDATE statement as the
    increment, so the check and the write cannot be separated by a
    concurrent request. Does not commit: callers wrap it in ``atomic()``.

    Raises:
        OwnershipError: no account with that id belongs to the user
    """
    result = await db.execute(
        update(Account)
        .where(Account.id == account_id, Account.user_id == user_id)
        .values(balance=Account.balance + delta)
        .returning(Account.id, Account.balance)
        .execution_options(synchronize_session=False)
    )
    row = result.first()
    if row is None:
        raise OwnershipError("Account not found or access denied")

    account = await db.get(Account, row.id, populate_existing=True)
    logger.debug(f"Account {account_id} adjusted by {delta}, balance now {row.balance}")
    return account
