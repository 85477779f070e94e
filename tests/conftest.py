# tests/conftest.py
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import zbank.models  # noqa: F401
from zbank.core.security import create_access_token, get_password_hash
from zbank.db import get_db
from zbank.db.base_class import Base
from zbank.main import app
from zbank.models.card import Card, CardStatus, CardType
from zbank.models.otp import OTPPurpose
from zbank.models.user import User
from zbank.services.email_service import EmailSender, get_email_sender
from zbank.services.otp_service import OTPService
from zbank.services.utils import generate_cvv, random_digits, to_cents

SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

API = "/api/v1"
PASSWORD = "Password123!"


class RecordingEmailSender(EmailSender):
    """Keeps outgoing mail in memory instead of talking to SMTP."""

    def __init__(self):
        self.sent = []

    def send(self, to_email, subject, html_body, text_body=None):
        self.sent.append({"to": to_email, "subject": subject, "html": html_body})
        return True


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture(scope="function")
def client(db_session, email_sender):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def otp_service(db_session, email_sender):
    return OTPService(db_session, email_sender)


@pytest.fixture
def make_user(db_session):
    def _make_user(email="alice@example.com", name="Alice", password=PASSWORD, balance=0):
        user = User(
            email=email,
            name=name,
            hashed_password=get_password_hash(password),
            balance_cents=to_cents(balance),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_card(db_session):
    def _make_card(user, balance=100, status=CardStatus.ACTIVE, card_type=CardType.VIRTUAL):
        card = Card(
            user_id=user.id,
            card_number=random_digits(16),
            card_type=card_type,
            is_virtual=card_type == CardType.VIRTUAL,
            scheme="VISA",
            cvv=generate_cvv(),
            expiry_date=datetime.utcnow() + timedelta(days=365 * 3),
            cardholder_name=user.name or "Card Holder",
            status=status,
            balance_cents=to_cents(balance),
            daily_limit_cents=to_cents(1000),
        )
        db_session.add(card)
        db_session.commit()
        db_session.refresh(card)
        return card

    return _make_card


@pytest.fixture
def alice(make_user):
    return make_user("alice@example.com", "Alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob@example.com", "Bob")


def bearer(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}


@pytest.fixture
def headers_for():
    return bearer


@pytest.fixture
def auth_headers(alice):
    return bearer(alice)


@pytest.fixture
def transfer_otp(otp_service):
    def _issue(user):
        return otp_service.generate(user.email, OTPPurpose.TRANSFER)

    return _issue
