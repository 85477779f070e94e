# tests/test_account_management.py
from fastapi import status

from zbank.models.card import Card
from zbank.models.otp import OTP, OTPPurpose
from zbank.models.transaction import Transaction, TransactionStatus, TransactionType
from zbank.models.user import User
from tests.conftest import API, PASSWORD


class TestUserSearch:
    """Recipient lookup by email or name"""

    def test_search_matches_email_and_name(self, client, alice, bob, make_user, auth_headers):
        make_user("robert@example.com", "Rob")

        response = client.get(f"{API}/users/search", params={"q": "bob"}, headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert [u["email"] for u in response.json()] == ["bob@example.com"]
        assert set(response.json()[0]) == {"id", "email", "name"}

        response = client.get(f"{API}/users/search", params={"q": "ROB"}, headers=auth_headers)
        assert [u["email"] for u in response.json()] == ["robert@example.com"]

    def test_short_query_returns_nothing(self, client, alice, bob, auth_headers):
        for q in ("", "b"):
            response = client.get(f"{API}/users/search", params={"q": q}, headers=auth_headers)
            assert response.status_code == status.HTTP_200_OK
            assert response.json() == []

    def test_excludes_caller(self, client, alice, auth_headers):
        response = client.get(f"{API}/users/search", params={"q": "alice"}, headers=auth_headers)
        assert response.json() == []

    def test_results_are_capped(self, client, alice, make_user, auth_headers):
        for i in range(12):
            make_user(f"user{i:02d}@example.com", f"User {i}")

        response = client.get(f"{API}/users/search", params={"q": "user"}, headers=auth_headers)
        assert len(response.json()) == 10

    def test_requires_session(self, client):
        response = client.get(f"{API}/users/search", params={"q": "bob"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestAccountDeletion:
    """Deleting an account removes everything that belongs to it"""

    def _populate(self, db_session, user, card, otp_service):
        db_session.add(Transaction(
            card_id=card.id,
            user_id=user.id,
            amount_cents=500,
            type=TransactionType.PAYMENT,
            status=TransactionStatus.COMPLETED,
            description="Groceries",
        ))
        db_session.commit()
        otp_service.generate(user.email, OTPPurpose.TRANSFER)

    def test_delete_account_with_password(
        self, client, db_session, alice, bob, make_card, otp_service, headers_for
    ):
        card = make_card(alice)
        bobs_card = make_card(bob)
        self._populate(db_session, alice, card, otp_service)
        self._populate(db_session, bob, bobs_card, otp_service)
        alice_id = alice.id

        response = client.post(
            f"{API}/users/delete-account", json={"password": PASSWORD}, headers=headers_for(alice)
        )

        assert response.status_code == status.HTTP_200_OK
        db_session.expire_all()
        assert db_session.query(User).filter(User.email == "alice@example.com").count() == 0
        assert db_session.query(Card).filter(Card.user_id == alice_id).count() == 0
        assert db_session.query(Transaction).filter(Transaction.user_id == alice_id).count() == 0
        assert db_session.query(OTP).filter(OTP.email == "alice@example.com").count() == 0

        # Other users are untouched
        assert db_session.query(Card).filter(Card.user_id == bob.id).count() == 1
        assert db_session.query(Transaction).filter(Transaction.user_id == bob.id).count() == 1
        assert db_session.query(OTP).filter(OTP.email == bob.email).count() == 1

    def test_transfer_credits_on_deleted_users_cards_are_removed(
        self, client, db_session, alice, bob, make_card, auth_headers, transfer_otp
    ):
        alice_card = make_card(alice, balance=100)
        make_card(bob, balance=0)
        response = client.post(f"{API}/transfers", headers=auth_headers, json={
            "recipientEmail": bob.email, "cardId": alice_card.id, "amount": 10, "otp": transfer_otp(alice),
        })
        assert response.status_code == status.HTTP_201_CREATED

        response = client.delete(f"{API}/users/delete", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        db_session.expire_all()
        assert db_session.query(Transaction).count() == 1
        remaining = db_session.query(Transaction).one()
        assert remaining.user_id == bob.id

    def test_password_is_required(self, client, alice, auth_headers, db_session):
        response = client.post(f"{API}/users/delete-account", json={}, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Password is required to delete account"
        assert db_session.query(User).count() == 1

    def test_wrong_password(self, client, alice, auth_headers, db_session):
        response = client.post(f"{API}/users/delete-account", json={"password": "nope"}, headers=auth_headers)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"] == "Invalid password"
        assert db_session.query(User).count() == 1

    def test_token_stops_working_after_deletion(self, client, alice, auth_headers):
        assert client.delete(f"{API}/users/delete", headers=auth_headers).status_code == status.HTTP_200_OK
        assert client.get(f"{API}/auth/me", headers=auth_headers).status_code == status.HTTP_401_UNAUTHORIZED
