# zbank/schemas/card.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_validator

from zbank.models.card import CardStatus, CardType
from zbank.schemas.base import APIModel
from zbank.schemas.transaction import TransactionOut


class CardCreate(APIModel):
    card_type: CardType
    scheme: str = Field(..., min_length=1)
    cardholder_name: Optional[str] = Field(None, min_length=2)
    credit_limit: Optional[float] = Field(None, ge=0)
    daily_limit: float = Field(..., ge=100, le=10000)
    pin: Optional[str] = Field(None, pattern=r"^\d{4}$")

    # Delivery information (required for physical cards)
    delivery_address: Optional[str] = None
    delivery_city: Optional[str] = None
    delivery_state: Optional[str] = None
    delivery_zip_code: Optional[str] = None
    delivery_country: Optional[str] = None

    @model_validator(mode="after")
    def physical_cards_need_delivery(self):
        if self.card_type == CardType.PHYSICAL and not all((
            self.delivery_address,
            self.delivery_city,
            self.delivery_state,
            self.delivery_zip_code,
            self.delivery_country,
        )):
            raise ValueError("Delivery address is required for physical cards")
        return self


class CardStatusUpdate(APIModel):
    status: CardStatus


class CardOut(APIModel):
    id: int
    user_id: int
    card_number: str
    card_type: CardType
    is_virtual: bool
    status: CardStatus
    balance: float
    scheme: str
    cvv: str
    expiry_date: datetime
    cardholder_name: str
    daily_limit: float
    credit_limit: Optional[float] = None
    delivery_address: Optional[str] = None
    delivery_city: Optional[str] = None
    delivery_state: Optional[str] = None
    delivery_zip_code: Optional[str] = None
    delivery_country: Optional[str] = None
    created_at: Optional[datetime] = None


class CardWithTransactions(CardOut):
    recent_transactions: List[TransactionOut] = []


class RecipientCardOut(APIModel):
    id: int
    card_number: str
    card_type: CardType
    scheme: str
    balance: float
    cardholder_name: str
