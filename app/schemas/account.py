# app/schemas/account.py
from decimal import Decimal
from pydantic import BaseModel, ConfigDict

class AccountRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    balance: Decimal
