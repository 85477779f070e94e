# zbank/services/utils.py
import secrets
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN

from sqlalchemy.orm import Session

from zbank.core.exceptions import InvalidInput
from zbank.models.card import Card

# Largest amount accepted for a single payment or transfer
MAX_AMOUNT = 1_000_000_000


def to_cents(amount) -> int:
    """Convert a currency amount to integer cents."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_EVEN))


def amount_to_cents(amount) -> int:
    """Cents for a money movement: finite, whole cents, between 0.01 and MAX_AMOUNT."""
    try:
        value = Decimal(str(amount))
        if not value.is_finite() or value != value.quantize(Decimal("0.01")):
            raise InvalidInput("Amount must be a number with at most 2 decimal places")
    except InvalidOperation:
        raise InvalidInput("Amount must be a number with at most 2 decimal places")

    cents = int(value * 100)
    if cents <= 0:
        raise InvalidInput("Amount must be greater than 0")
    if cents > MAX_AMOUNT * 100:
        raise InvalidInput(f"Amount must not exceed {MAX_AMOUNT}")
    return cents


def random_digits(length: int) -> str:
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


def generate_card_number(db: Session, length: int = 16) -> str:
    """Generate a card number not yet present in the cards table."""
    while True:
        number = random_digits(length)
        if not db.query(Card.id).filter(Card.card_number == number).first():
            return number


def generate_cvv() -> str:
    return random_digits(3)
