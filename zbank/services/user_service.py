# zbank/services/user_service.py
import logging
from typing import List, Optional, Tuple

from fastapi import Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session

from zbank.core.exceptions import InvalidInput, NotFound, Unauthorized
from zbank.core.security import create_access_token, get_password_hash, verify_password
from zbank.db import get_db
from zbank.models.card import Card, CardStatus
from zbank.models.otp import OTP, OTPPurpose
from zbank.models.transaction import Transaction
from zbank.models.user import User
from zbank.services.email_service import EmailSender, get_email_sender, send_welcome_email
from zbank.services.otp_service import OTPService

logger = logging.getLogger(__name__)

SEARCH_MIN_LENGTH = 2
SEARCH_LIMIT = 10


class UserService:
    def __init__(self, db: Session, email_sender: EmailSender):
        self.db = db
        self.email_sender = email_sender
        self.otps = OTPService(db, email_sender)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def register(self, name: str, email: str, password: str, otp: str) -> User:
        """Create a user once the signup code for ``email`` checks out."""
        try:
            self.otps.verify(email, otp, OTPPurpose.SIGNUP, commit=False)

            if self.get_by_email(email):
                raise InvalidInput("User with this email already exists")

            user = User(name=name, email=email, hashed_password=get_password_hash(password))
            self.db.add(user)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(user)
        logger.info("Registered user %s", user.id)
        send_welcome_email(self.email_sender, user.email, user.name or user.email)
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.get_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            raise Unauthorized("Invalid email or password")
        return user

    def sign_in(self, email: str, password: str, otp: str) -> Tuple[User, str]:
        user = self.authenticate(email, password)
        self.otps.verify(email, otp, OTPPurpose.SIGNIN)
        token = create_access_token({"sub": user.email})
        logger.info("User %s signed in", user.id)
        return user, token

    def search(self, query: Optional[str], exclude_user_id: int) -> List[User]:
        query = (query or "").strip().lower()
        if len(query) < SEARCH_MIN_LENGTH:
            return []

        pattern = f"%{query}%"
        return (
            self.db.query(User)
            .filter(
                or_(User.email.ilike(pattern), User.name.ilike(pattern)),
                User.id != exclude_user_id,
            )
            .order_by(User.email)
            .limit(SEARCH_LIMIT)
            .all()
        )

    def recipient_cards(self, email: str) -> Tuple[User, List[Card]]:
        user = self.get_by_email(email)
        if not user:
            raise NotFound("User not found")

        cards = (
            self.db.query(Card)
            .filter(Card.user_id == user.id, Card.status == CardStatus.ACTIVE)
            .order_by(Card.id)
            .all()
        )
        return user, cards

    def delete(self, user: User) -> None:
        """Remove the user with their cards, transactions and OTP codes."""
        user_id, email = user.id, user.email
        card_ids = [row.id for row in self.db.query(Card.id).filter(Card.user_id == user_id)]
        try:
            self.db.query(Transaction).filter(
                or_(Transaction.user_id == user_id, Transaction.card_id.in_(card_ids))
            ).delete(synchronize_session=False)
            self.db.query(Card).filter(Card.user_id == user_id).delete(synchronize_session=False)
            self.db.query(OTP).filter(OTP.email == email).delete(synchronize_session=False)
            self.db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Deleted user %s", user_id)

    def delete_with_password(self, user: User, password: Optional[str]) -> None:
        if not password:
            raise InvalidInput("Password is required to delete account")
        if not verify_password(password, user.hashed_password):
            raise Unauthorized("Invalid password")
        self.delete(user)


def get_user_service(
    db: Session = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
) -> UserService:
    return UserService(db, email_sender)
