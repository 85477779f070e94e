# zbank/models/transaction.py
import enum

from sqlalchemy import Column, Integer, String, BigInteger, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship

from zbank.db.base_class import Base


class TransactionType(str, enum.Enum):
    PAYMENT = "PAYMENT"
    REFUND = "REFUND"
    TOP_UP = "TOP_UP"
    BILL_PAYMENT = "BILL_PAYMENT"
    MOBILE_RECHARGE = "MOBILE_RECHARGE"
    QR_PAYMENT = "QR_PAYMENT"
    INTERNET_BILL = "INTERNET_BILL"
    ELECTRICITY_BILL = "ELECTRICITY_BILL"
    GAS_BILL = "GAS_BILL"
    WATER_BILL = "WATER_BILL"
    CABLE_TV = "CABLE_TV"
    INSURANCE = "INSURANCE"
    EDUCATION_FEES = "EDUCATION_FEES"
    HEALTHCARE = "HEALTHCARE"
    TRANSPORT = "TRANSPORT"
    TRANSFER = "TRANSFER"


# Types that debit the card they are posted against
PAYMENT_TYPES = frozenset(
    t for t in TransactionType
    if t not in (TransactionType.REFUND, TransactionType.TOP_UP, TransactionType.TRANSFER)
)


class TransactionStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    card_id = Column(Integer, ForeignKey("cards.id", ondelete="CASCADE"), nullable=False, index=True)

    amount_cents = Column(BigInteger, nullable=False)
    type = Column(Enum(TransactionType, name="transactiontype"), nullable=False)
    status = Column(
        Enum(TransactionStatus, name="transactionstatus"),
        nullable=False,
        default=TransactionStatus.PENDING,
    )
    description = Column(String, nullable=False)
    merchant_name = Column(String, nullable=True)
    category = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), index=True)

    user = relationship("User", back_populates="transactions")
    card = relationship("Card", back_populates="transactions")

    @property
    def amount(self) -> float:
        return self.amount_cents / 100
