# zbank/api/__init__.py
from fastapi import APIRouter

from zbank.api import auth, cards, otp, transactions, transfers, users

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(otp.router)
api_router.include_router(cards.router)
api_router.include_router(transactions.router)
api_router.include_router(transfers.router)
api_router.include_router(users.router)

__all__ = ["api_router"]
