# app/schemas/transaction.py
import enum
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.transaction import DEFAULT_CATEGORY

class TransactionKind(str, enum.Enum):
    income = "income"
    expense = "expense"

class TransactionCreate(BaseModel):
    account_id: int
    # Unsigned magnitude; the sign comes from ``type``
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    type: TransactionKind
    description: Optional[str] = Field(None, max_length=255, description="E.g. Groceries")
    category: str = Field(DEFAULT_CATEGORY, max_length=100)
    date: Optional[datetime] = Field(None, description="ISO 8601 date/time of transaction, defaults to now")

    @field_validator("category", mode="before")
    @classmethod
    def blank_category_is_other(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_CATEGORY
        return value.strip() if isinstance(value, str) else value

    @field_validator("date")
    @classmethod
    def store_naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

class TransactionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    account_id: int
    amount: Decimal
    comment: Optional[str] = None
    category: str
    date: datetime

class TransactionView(TransactionRead):
    account_name: str

class TransactionCreated(BaseModel):
    message: str
    newBalance: Decimal
    transaction: TransactionRead

class TransactionDeleted(BaseModel):
    message: str
    newBalance: Decimal

class CategoryTotal(BaseModel):
    category: str
    total: Decimal
    count: int
