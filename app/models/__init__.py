# Import every model so Base.metadata knows all tables (create_all, Alembic)
from app.models.user import User
from app.models.account import Account
from app.models.transaction import Transaction

__all__ = ["User", "Account", "Transaction"]
