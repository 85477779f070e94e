# zbank/models/__init__.py
from zbank.models.user import User
from zbank.models.card import Card, CardStatus, CardType
from zbank.models.transaction import PAYMENT_TYPES, Transaction, TransactionStatus, TransactionType
from zbank.models.otp import OTP, OTPPurpose

__all__ = [
    "User",
    "Card",
    "CardStatus",
    "CardType",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "PAYMENT_TYPES",
    "OTP",
    "OTPPurpose",
]
