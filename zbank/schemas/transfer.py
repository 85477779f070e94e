# zbank/schemas/transfer.py
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from zbank.schemas.base import AmountField, APIModel, check_whole_cents
from zbank.schemas.card import RecipientCardOut
from zbank.schemas.user import UserOut


class TransferCreate(APIModel):
    recipient_email: EmailStr
    card_id: int
    amount: float = AmountField()
    description: str = Field("Transfer", max_length=255)
    otp: str = Field(..., min_length=1)
    recipient_card_id: Optional[int] = None

    @field_validator("amount")
    @classmethod
    def amount_in_whole_cents(cls, v: float) -> float:
        return check_whole_cents(v)


class TransferResult(APIModel):
    message: str = "Transfer completed successfully"
    transfer_type: str
    recipient: UserOut
    recipient_card_id: Optional[int] = None
    amount: float
    description: str
    debit_transaction_id: int
    credit_transaction_id: int


class RecipientCards(APIModel):
    user: UserOut
    cards: List[RecipientCardOut]
