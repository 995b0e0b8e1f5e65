# app/models/account.py
from decimal import Decimal
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base

class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=100), nullable=False)
    balance = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))

    user = relationship("User", back_populates="accounts")
    transactions = relationship(
        "Transaction",
        back_populates="account",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Account name={self.name} balance={self.balance} user_id={self.user_id}>"
