# zbank/services/card_service.py
import logging
from datetime import datetime, timedelta
from typing import List

from fastapi import Depends
from sqlalchemy.orm import Session, selectinload

from zbank.core.config import settings
from zbank.core.exceptions import Forbidden, InsufficientBalance, InvalidState, NotFound
from zbank.core.security import get_pin_hash
from zbank.db import get_db
from zbank.models.card import Card, CardStatus, CardType
from zbank.models.transaction import Transaction
from zbank.models.user import User
from zbank.schemas.card import CardCreate
from zbank.services.email_service import EmailSender, get_email_sender, send_card_status_notification
from zbank.services.utils import generate_card_number, generate_cvv, to_cents

logger = logging.getLogger(__name__)


class CardLedger:
    """Card records and the ownership/status checks guarding them.

    ``debit`` and ``credit`` only touch the in-session row; committing is left to
    the payment and transfer engines so that balance and ledger rows land together.
    """

    def __init__(self, db: Session, email_sender: EmailSender):
        self.db = db
        self.email_sender = email_sender

    def list_for_user(self, user_id: int) -> List[Card]:
        return (
            self.db.query(Card)
            .options(selectinload(Card.transactions))
            .filter(Card.user_id == user_id)
            .order_by(Card.created_at.desc(), Card.id.desc())
            .all()
        )

    def active_cards(self, user_id: int) -> List[Card]:
        return (
            self.db.query(Card)
            .filter(Card.user_id == user_id, Card.status == CardStatus.ACTIVE)
            .order_by(Card.id)
            .all()
        )

    def create(self, user: User, card_in: CardCreate) -> Card:
        card = Card(
            user_id=user.id,
            card_number=generate_card_number(self.db),
            card_type=card_in.card_type,
            is_virtual=card_in.card_type == CardType.VIRTUAL,
            scheme=card_in.scheme,
            cvv=generate_cvv(),
            expiry_date=datetime.utcnow() + timedelta(days=365 * settings.CARD_VALIDITY_YEARS),
            cardholder_name=card_in.cardholder_name or user.name or "Card Holder",
            pin_hash=get_pin_hash(card_in.pin) if card_in.pin else None,
            status=CardStatus.ACTIVE,
            balance_cents=to_cents(settings.CARD_ONBOARDING_BALANCE),
            daily_limit_cents=to_cents(card_in.daily_limit),
            credit_limit_cents=to_cents(card_in.credit_limit) if card_in.credit_limit is not None else None,
            delivery_address=card_in.delivery_address,
            delivery_city=card_in.delivery_city,
            delivery_state=card_in.delivery_state,
            delivery_zip_code=card_in.delivery_zip_code,
            delivery_country=card_in.delivery_country,
        )
        self.db.add(card)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(card)

        logger.info("Issued %s card %s for user %s", card.card_type.value, card.id, user.id)
        return card

    def get_owned(self, card_id: int, requester_id: int, lock: bool = False) -> Card:
        query = self.db.query(Card).filter(Card.id == card_id)
        if lock:
            query = query.with_for_update()
        card = query.first()

        if card is None:
            raise NotFound("Card not found")
        if card.user_id != requester_id:
            raise Forbidden("Unauthorized")
        return card

    def lock_for_debit(self, card_id: int, requester_id: int) -> Card:
        """Row-lock an owned card and require it to be ACTIVE."""
        card = self.get_owned(card_id, requester_id, lock=True)
        if not card.is_active:
            raise InvalidState("Card is not active")
        return card

    def set_status(self, card_id: int, requester_id: int, new_status: CardStatus) -> Card:
        card = self.get_owned(card_id, requester_id)
        old_status = card.status
        card.status = CardStatus(new_status)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(card)

        if old_status != card.status:
            logger.info("Card %s status %s -> %s", card.id, old_status.value, card.status.value)
            send_card_status_notification(
                self.email_sender,
                card.user.email,
                card.user.name or card.user.email,
                card.card_number,
                old_status.value,
                card.status.value,
            )
        return card

    def delete(self, card_id: int, requester_id: int) -> None:
        card = self.get_owned(card_id, requester_id)
        try:
            self.db.query(Transaction).filter(Transaction.card_id == card.id).delete(
                synchronize_session=False
            )
            self.db.query(Card).filter(Card.id == card.id).delete(synchronize_session=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Deleted card %s of user %s", card_id, requester_id)

    # Balance mutation; callers own the unit of work.
    def debit(self, card: Card, amount_cents: int) -> None:
        if card.balance_cents < amount_cents:
            raise InsufficientBalance()
        card.balance_cents -= amount_cents

    def credit(self, card: Card, amount_cents: int) -> None:
        card.balance_cents += amount_cents


def get_card_ledger(
    db: Session = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
) -> CardLedger:
    return CardLedger(db, email_sender)
