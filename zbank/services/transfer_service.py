# zbank/services/transfer_service.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from zbank.core.exceptions import (
    BankingError,
    InsufficientBalance,
    InternalError,
    InvalidRecipientCard,
    InvalidState,
    NotFound,
    SelfTransfer,
)
from zbank.db import get_db
from zbank.models.card import Card
from zbank.models.otp import OTPPurpose
from zbank.models.transaction import Transaction, TransactionStatus, TransactionType
from zbank.models.user import User
from zbank.services.card_service import CardLedger
from zbank.services.email_service import EmailSender, get_email_sender
from zbank.services.otp_service import OTPService
from zbank.services.utils import amount_to_cents

logger = logging.getLogger(__name__)

CARD_TO_CARD = "card-to-card"
ACCOUNT_BALANCE = "account-balance"


class TransferEngine:
    def __init__(self, db: Session, email_sender: EmailSender):
        self.db = db
        self.cards = CardLedger(db, email_sender)
        self.otps = OTPService(db, email_sender)

    def _resolve_target_card(self, recipient: User, recipient_card_id: Optional[int]) -> Optional[Card]:
        active = self.cards.active_cards(recipient.id)

        if recipient_card_id is not None:
            for card in active:
                if card.id == recipient_card_id:
                    return card
            raise InvalidRecipientCard()

        if len(active) == 1:
            return active[0]
        # No card, or several and none chosen: the account balance is credited
        return None

    def _lock_cards(self, ids: List[int]) -> Dict[int, Card]:
        """Lock card rows in ascending id order and reload their state."""
        locked = {}
        for card_id in sorted(set(ids)):
            locked[card_id] = (
                self.db.query(Card)
                .filter(Card.id == card_id)
                .with_for_update()
                .populate_existing()
                .one()
            )
        return locked

    def transfer(self, sender: User, card_id: int, recipient_email: str, amount: float,
                 description: str, otp: str, recipient_card_id: Optional[int] = None) -> Dict[str, Any]:
        amount_cents = amount_to_cents(amount)

        try:
            # Consumed inside this unit of work; a failed transfer leaves the code usable
            self.otps.verify(sender.email, otp, OTPPurpose.TRANSFER, commit=False)

            sender_card = self.cards.get_owned(card_id, sender.id)
            if not sender_card.is_active:
                raise InvalidState("Card is not active")
            if sender_card.balance_cents < amount_cents:
                raise InsufficientBalance()

            recipient = self.db.query(User).filter(User.email == recipient_email).first()
            if recipient is None:
                raise NotFound("Recipient not found")
            if recipient.id == sender.id:
                raise SelfTransfer()

            target_card = self._resolve_target_card(recipient, recipient_card_id)

            locked = self._lock_cards([sender_card.id] + ([target_card.id] if target_card else []))
            sender_card = locked[sender_card.id]
            if not sender_card.is_active:
                raise InvalidState("Card is not active")

            if target_card is not None:
                target_card = locked[target_card.id]
                if not target_card.is_active:
                    raise InvalidRecipientCard()
            else:
                recipient = (
                    self.db.query(User)
                    .filter(User.id == recipient.id)
                    .with_for_update()
                    .populate_existing()
                    .one()
                )

            debit = Transaction(
                card_id=sender_card.id,
                user_id=sender.id,
                amount_cents=amount_cents,
                type=TransactionType.TRANSFER,
                status=TransactionStatus.COMPLETED,
                description=f"Transfer to {recipient.email}: {description}",
                merchant_name=recipient.name or recipient.email,
                category="Transfer",
            )
            self.db.add(debit)
            self.cards.debit(sender_card, amount_cents)

            credit = Transaction(
                # Account-balance credits keep the sender card as their reference
                card_id=target_card.id if target_card else sender_card.id,
                user_id=recipient.id,
                amount_cents=amount_cents,
                type=TransactionType.TRANSFER,
                status=TransactionStatus.COMPLETED,
                description=f"Transfer from {sender.email}: {description}",
                merchant_name=sender.name or sender.email,
                category="Transfer",
            )
            self.db.add(credit)

            if target_card is not None:
                self.cards.credit(target_card, amount_cents)
            else:
                recipient.balance_cents = (recipient.balance_cents or 0) + amount_cents

            self.db.commit()
        except BankingError:
            self.db.rollback()
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Transfer from user %s card %s failed", sender.id, card_id)
            raise InternalError("Failed to process transfer")

        transfer_type = CARD_TO_CARD if target_card is not None else ACCOUNT_BALANCE
        logger.info(
            "Transfer %s -> %s: %.2f (%s), debit=%s credit=%s",
            sender.id, recipient.id, amount_cents / 100, transfer_type, debit.id, credit.id,
        )

        return {
            "transfer_type": transfer_type,
            "recipient": {"id": recipient.id, "email": recipient.email, "name": recipient.name},
            "recipient_card_id": target_card.id if target_card is not None else None,
            "amount": amount_cents / 100,
            "description": description,
            "debit_transaction_id": debit.id,
            "credit_transaction_id": credit.id,
        }


def get_transfer_engine(
    db: Session = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
) -> TransferEngine:
    return TransferEngine(db, email_sender)
