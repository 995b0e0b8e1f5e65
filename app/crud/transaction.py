# app/crud/transaction.py
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import desc, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.db_utils import atomic
from app.core.exceptions import OwnershipError
from app.crud.account import adjust_balance, get_account
from app.models.account import Account
from app.models.transaction import Transaction, DEFAULT_CATEGORY
from app.schemas.transaction import CategoryTotal, TransactionCreate, TransactionKind, TransactionView

logger = logging.getLogger(__name__)

def signed_amount(amount: Decimal, kind: TransactionKind) -> Decimal:
    """Expenses leave the wallet, so they are stored negative."""
    if kind == TransactionKind.expense:
        return -amount
    return amount

async def get_transaction_for_user(transaction_id: int, user_id: uuid.UUID, db: AsyncSession) -> Optional[Transaction]:
    result = await db.execute(
        select(Transaction)
        .join(Account, Transaction.account_id == Account.id)
        .where(Transaction.id == transaction_id, Account.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def record_transaction(
    user_id: uuid.UUID,
    tx_in: TransactionCreate,
    db: AsyncSession,
) -> Tuple[Transaction, Decimal]:
    """
    Append a transaction and move its account balance in one unit of work.

    Returns the new row and the account's updated balance. Either both the
    row and the balance change are committed, or neither is.

    Raises:
        OwnershipError: (403) the account does not belong to the user
        StorageError: the database rejected the insert or the update
    """
    delta = signed_amount(tx_in.amount, tx_in.type)

    async with atomic(db, "record transaction"):
        account = await get_account(tx_in.account_id, user_id, db, for_update=True)
        if account is None:
            logger.warning(f"User {user_id} tried to write to account {tx_in.account_id}")
            raise OwnershipError("Access denied", 403)

        new_tx = Transaction(
            account_id=account.id,
            amount=delta,
            comment=tx_in.description,
            category=tx_in.category or DEFAULT_CATEGORY,
            date=tx_in.date or datetime.now(timezone.utc).replace(tzinfo=None),
        )
        db.add(new_tx)
        await db.flush()

        account = await adjust_balance(account.id, user_id, delta, db)
        new_balance = account.balance

    logger.info(f"Recorded transaction {new_tx.id} ({delta}) on account {account.id}")
    return new_tx, new_balance

async def delete_transaction(user_id: uuid.UUID, transaction_id: int, db: AsyncSession) -> Decimal:
    """
    Remove a transaction and reverse its effect on the owning account.

    Returns the account's balance after the reversal.

    Raises:
        OwnershipError: (404) no such transaction among the user's accounts
        StorageError: the database rejected the delete or the update
    """
    async with atomic(db, "delete transaction"):
        tx = await get_transaction_for_user(transaction_id, user_id, db)
        if tx is None:
            raise OwnershipError("Transaction not found")

        account_id, amount = tx.account_id, tx.amount
        await db.delete(tx)
        await db.flush()

        account = await adjust_balance(account_id, user_id, -amount, db)
        new_balance = account.balance

    logger.info(f"Deleted transaction {transaction_id}, reversed {amount} on account {account_id}")
    return new_balance

async def list_recent_transactions(
    user_id: uuid.UUID,
    db: AsyncSession,
    limit: Optional[int] = None,
) -> List[TransactionView]:
    """History across all of the user's accounts, newest first, with account names."""
    query = (
        select(
            Transaction.id,
            Transaction.account_id,
            Transaction.amount,
            Transaction.comment,
            Transaction.category,
            Transaction.date,
            Account.name.label("account_name"),
        )
        .join(Account, Transaction.account_id == Account.id)
        .where(Account.user_id == user_id)
        .order_by(desc(Transaction.date), desc(Transaction.id))
    )
    if limit is not None:
        query = query.limit(limit)

    result = await db.execute(query)
    return [TransactionView.model_validate(row, from_attributes=True) for row in result.all()]

async def summarize_by_category(
    user_id: uuid.UUID,
    db: AsyncSession,
    kind: Optional[TransactionKind] = None,
) -> List[CategoryTotal]:
    """Per-category totals for charts. ``kind`` keeps only income or only expense rows."""
    query = (
        select(
            Transaction.category,
            func.sum(Transaction.amount).label("total"),
            func.count(Transaction.id).label("count"),
        )
        .join(Account, Transaction.account_id == Account.id)
        .where(Account.user_id == user_id)
        .group_by(Transaction.category)
        .order_by(Transaction.category)
    )
    if kind == TransactionKind.income:
        query = query.where(Transaction.amount > 0)
    elif kind == TransactionKind.expense:
        query = query.where(Transaction.amount < 0)

    result = await db.execute(query)
    return [
        CategoryTotal(category=row.category, total=Decimal(row.total or 0).quantize(Decimal("0.01")), count=row.count)
        for row in result.all()
    ]
