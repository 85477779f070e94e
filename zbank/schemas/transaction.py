# zbank/schemas/transaction.py
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from zbank.models.transaction import TransactionStatus, TransactionType
from zbank.schemas.base import AmountField, APIModel, check_whole_cents


class PaymentCreate(APIModel):
    card_id: int
    amount: float = AmountField()
    type: TransactionType
    description: str = Field(..., min_length=1)
    merchant_name: Optional[str] = None
    category: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def amount_in_whole_cents(cls, v: float) -> float:
        return check_whole_cents(v)

    @field_validator("type")
    @classmethod
    def not_transfer(cls, v: TransactionType) -> TransactionType:
        if v == TransactionType.TRANSFER:
            raise ValueError("Transfers must be made through /transfers")
        return v


class TransactionOut(APIModel):
    id: int
    card_id: int
    user_id: int
    amount: float
    type: TransactionType
    status: TransactionStatus
    description: str
    merchant_name: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[datetime] = None
