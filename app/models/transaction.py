# app/models/transaction.py
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, DateTime, func
from sqlalchemy.orm import relationship
from app.core.database import Base

DEFAULT_CATEGORY = "Other"

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    # Signed: positive is income, negative is expense
    amount = Column(Numeric(12, 2), nullable=False)
    comment = Column(String(length=255), nullable=True)
    category = Column(String(length=100), nullable=False, default=DEFAULT_CATEGORY)
    date = Column(DateTime, nullable=False, server_default=func.now())

    account = relationship("Account", back_populates="transactions")

    def __repr__(self):
        return f"<Transaction amount={self.amount} date={self.date} account_id={self.account_id}>"
