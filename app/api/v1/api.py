from fastapi import APIRouter

from app.api.v1.routes import auth, accounts, transactions, users

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(accounts.router)
api_router.include_router(transactions.router)
api_router.include_router(users.router)
