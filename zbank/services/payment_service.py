# zbank/services/payment_service.py
import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from zbank.core.exceptions import BankingError, InsufficientBalance, InternalError
from zbank.db import get_db
from zbank.models.transaction import PAYMENT_TYPES, Transaction, TransactionStatus, TransactionType
from zbank.models.user import User
from zbank.services.card_service import CardLedger
from zbank.services.email_service import EmailSender, get_email_sender, send_transaction_notification
from zbank.services.utils import amount_to_cents

logger = logging.getLogger(__name__)


class PaymentEngine:
    def __init__(self, db: Session, email_sender: EmailSender):
        self.db = db
        self.email_sender = email_sender
        self.cards = CardLedger(db, email_sender)

    def pay(self, user: User, card_id: int, amount: float, type: TransactionType,
            description: str, merchant_name: Optional[str] = None,
            category: Optional[str] = None) -> Transaction:
        """Post a transaction against one of the user's cards.

        Payment-class types debit the card. The balance check, the ledger row and
        the debit are committed together while the card row is locked.
        """
        type = TransactionType(type)
        amount_cents = amount_to_cents(amount)
        debits_card = type in PAYMENT_TYPES and amount_cents > 0

        try:
            card = self.cards.lock_for_debit(card_id, user.id)

            if debits_card and card.balance_cents < amount_cents:
                raise InsufficientBalance()

            transaction = Transaction(
                card_id=card.id,
                user_id=user.id,
                amount_cents=amount_cents,
                type=type,
                status=TransactionStatus.COMPLETED,
                description=description,
                merchant_name=merchant_name,
                category=category,
            )
            self.db.add(transaction)

            if debits_card:
                self.cards.debit(card, amount_cents)

            self.db.commit()
        except BankingError:
            self.db.rollback()
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Payment failed for user %s on card %s", user.id, card_id)
            raise InternalError("Failed to create transaction")

        self.db.refresh(transaction)
        logger.info("Payment %s: %s %.2f on card %s", transaction.id, type.value, amount_cents / 100, card.id)

        send_transaction_notification(
            self.email_sender,
            user.email,
            user.name or user.email,
            type.value,
            amount_cents / 100,
            card.card_number,
        )
        return transaction

    def history(self, user_id: int, limit: int = 50) -> List[Transaction]:
        return (
            self.db.query(Transaction)
            .filter(Transaction.user_id == user_id)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .limit(limit)
            .all()
        )


def get_payment_engine(
    db: Session = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
) -> PaymentEngine:
    return PaymentEngine(db, email_sender)
