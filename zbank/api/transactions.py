# zbank/api/transactions.py
from typing import List

from fastapi import APIRouter, Depends, Query, status

from zbank.core.security import get_current_user
from zbank.models.user import User
from zbank.schemas.transaction import PaymentCreate, TransactionOut
from zbank.services.payment_service import PaymentEngine, get_payment_engine

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get("", response_model=List[TransactionOut])
def list_transactions(
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    payments: PaymentEngine = Depends(get_payment_engine),
):
    return payments.history(current_user.id, limit=limit)


@router.post("", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def create_transaction(
    payment: PaymentCreate,
    current_user: User = Depends(get_current_user),
    payments: PaymentEngine = Depends(get_payment_engine),
):
    return payments.pay(
        current_user,
        card_id=payment.card_id,
        amount=payment.amount,
        type=payment.type,
        description=payment.description,
        merchant_name=payment.merchant_name,
        category=payment.category,
    )
