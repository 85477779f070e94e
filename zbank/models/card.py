# zbank/models/card.py
import enum

from sqlalchemy import Column, Integer, String, ForeignKey, BigInteger, Boolean, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from zbank.db.base_class import Base


class CardType(str, enum.Enum):
    PHYSICAL = "PHYSICAL"
    VIRTUAL = "VIRTUAL"


class CardStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    FROZEN = "FROZEN"
    BLOCKED = "BLOCKED"


class Card(Base):
    __tablename__ = "cards"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Card details
    card_number = Column(String(16), unique=True, index=True, nullable=False)
    card_type = Column(Enum(CardType, name="cardtype"), nullable=False, default=CardType.VIRTUAL)
    is_virtual = Column(Boolean, nullable=False, default=True)
    scheme = Column(String, nullable=False)
    cvv = Column(String(3), nullable=False)
    expiry_date = Column(DateTime, nullable=False)
    cardholder_name = Column(String, nullable=False, default="Card Holder")
    pin_hash = Column(String, nullable=True)

    # Status, balance and limits
    status = Column(Enum(CardStatus, name="cardstatus"), nullable=False, default=CardStatus.ACTIVE)
    balance_cents = Column(BigInteger, nullable=False, default=0)
    credit_limit_cents = Column(BigInteger, nullable=True)
    daily_limit_cents = Column(BigInteger, nullable=False, default=100000)

    # Delivery (physical cards only)
    delivery_address = Column(String, nullable=True)
    delivery_city = Column(String, nullable=True)
    delivery_state = Column(String, nullable=True)
    delivery_zip_code = Column(String, nullable=True)
    delivery_country = Column(String, nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="cards")
    transactions = relationship(
        "Transaction",
        back_populates="card",
        order_by="Transaction.created_at.desc(), Transaction.id.desc()",
        passive_deletes=True,
    )

    @property
    def balance(self) -> float:
        return (self.balance_cents or 0) / 100

    @property
    def is_active(self) -> bool:
        return self.status == CardStatus.ACTIVE

    @property
    def daily_limit(self) -> float:
        return (self.daily_limit_cents or 0) / 100

    @property
    def credit_limit(self):
        return None if self.credit_limit_cents is None else self.credit_limit_cents / 100

    @property
    def recent_transactions(self):
        return self.transactions[:5]
