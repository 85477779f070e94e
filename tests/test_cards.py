# tests/test_cards.py
from datetime import datetime

from fastapi import status

from zbank.core.security import verify_pin
from zbank.models.card import Card, CardStatus, CardType
from zbank.models.transaction import Transaction, TransactionStatus, TransactionType
from tests.conftest import API

PHYSICAL_CARD = {
    "cardType": "PHYSICAL",
    "scheme": "MASTERCARD",
    "dailyLimit": 2500,
    "deliveryAddress": "1 Main St",
    "deliveryCity": "Springfield",
    "deliveryState": "IL",
    "deliveryZipCode": "62701",
    "deliveryCountry": "US",
}


class TestCardIssuance:
    def test_create_virtual_card(self, client, alice, auth_headers, db_session):
        response = client.post(
            f"{API}/cards",
            json={"cardType": "VIRTUAL", "scheme": "VISA", "dailyLimit": 1000, "pin": "1234"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["cardType"] == "VIRTUAL"
        assert body["isVirtual"] is True
        assert body["status"] == "ACTIVE"
        assert body["balance"] == 10000.0
        assert body["dailyLimit"] == 1000.0
        assert body["cardholderName"] == "Alice"
        assert len(body["cardNumber"]) == 16 and body["cardNumber"].isdigit()
        assert len(body["cvv"]) == 3
        assert "pin" not in body and "pinHash" not in body

        card = db_session.get(Card, body["id"])
        assert card.user_id == alice.id
        assert verify_pin("1234", card.pin_hash)

    def test_create_physical_card_with_delivery(self, client, auth_headers):
        response = client.post(f"{API}/cards", json=PHYSICAL_CARD, headers=auth_headers)

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["cardType"] == "PHYSICAL"
        assert body["isVirtual"] is False
        assert body["deliveryCity"] == "Springfield"

    def test_physical_card_requires_delivery(self, client, auth_headers):
        payload = dict(PHYSICAL_CARD)
        del payload["deliveryZipCode"]

        response = client.post(f"{API}/cards", json=payload, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Delivery address is required" in response.json()["error"]

    def test_daily_limit_bounds(self, client, auth_headers):
        for limit in (99, 10001):
            response = client.post(
                f"{API}/cards",
                json={"cardType": "VIRTUAL", "scheme": "VISA", "dailyLimit": limit},
                headers=auth_headers,
            )
            assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_pin_must_be_four_digits(self, client, auth_headers):
        response = client.post(
            f"{API}/cards",
            json={"cardType": "VIRTUAL", "scheme": "VISA", "dailyLimit": 500, "pin": "12a4"},
            headers=auth_headers,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_scheme_is_required(self, client, auth_headers):
        response = client.post(
            f"{API}/cards",
            json={"cardType": "VIRTUAL", "scheme": "", "dailyLimit": 500},
            headers=auth_headers,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_session(self, client):
        response = client.post(f"{API}/cards", json={"cardType": "VIRTUAL", "scheme": "VISA", "dailyLimit": 500})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestCardListing:
    def test_lists_only_own_cards_with_recent_transactions(
        self, client, alice, bob, make_card, auth_headers, db_session
    ):
        card = make_card(alice, balance=50)
        make_card(bob)
        for i in range(7):
            db_session.add(Transaction(
                card_id=card.id, user_id=alice.id, amount_cents=100 + i,
                type=TransactionType.PAYMENT, status=TransactionStatus.COMPLETED,
                description=f"coffee {i}",
            ))
        db_session.commit()

        response = client.get(f"{API}/cards", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        cards = response.json()
        assert [c["id"] for c in cards] == [card.id]
        assert cards[0]["balance"] == 50.0
        assert len(cards[0]["recentTransactions"]) == 5

    def test_recent_transactions_in_same_second_are_newest_first(
        self, client, alice, make_card, auth_headers, db_session
    ):
        card = make_card(alice)
        stamp = datetime(2024, 1, 1, 12, 0, 0)
        for i in range(7):
            db_session.add(Transaction(
                card_id=card.id, user_id=alice.id, amount_cents=100 + i,
                type=TransactionType.PAYMENT, status=TransactionStatus.COMPLETED,
                description=f"coffee {i}", created_at=stamp,
            ))
        db_session.commit()
        ids = [t.id for t in db_session.query(Transaction).order_by(Transaction.id.desc())]

        response = client.get(f"{API}/cards", headers=auth_headers)

        assert [t["id"] for t in response.json()[0]["recentTransactions"]] == ids[:5]


class TestCardStatus:
    def test_owner_can_change_status(self, client, alice, make_card, auth_headers, email_sender):
        card = make_card(alice)

        response = client.patch(f"{API}/cards/{card.id}/status", json={"status": "FROZEN"}, headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "FROZEN"
        assert email_sender.sent[-1]["subject"] == f"Card Status Changed - {card.card_number[-4:]}"

    def test_status_email_escapes_user_name(self, client, make_user, make_card, headers_for, email_sender):
        user = make_user("mallory@example.com", "<script>alert(1)</script>")
        card = make_card(user)

        client.patch(f"{API}/cards/{card.id}/status", json={"status": "FROZEN"}, headers=headers_for(user))

        body = email_sender.sent[-1]["html"]
        assert "<script>" not in body
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in body

    def test_any_transition_is_allowed(self, client, alice, make_card, auth_headers):
        card = make_card(alice, status=CardStatus.BLOCKED)

        response = client.patch(f"{API}/cards/{card.id}/status", json={"status": "ACTIVE"}, headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "ACTIVE"

    def test_other_users_card_is_forbidden(self, client, bob, make_card, auth_headers, db_session):
        card = make_card(bob)

        response = client.patch(f"{API}/cards/{card.id}/status", json={"status": "BLOCKED"}, headers=auth_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        db_session.refresh(card)
        assert card.status == CardStatus.ACTIVE

    def test_missing_card(self, client, auth_headers):
        response = client.patch(f"{API}/cards/999/status", json={"status": "FROZEN"}, headers=auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "Card not found"

    def test_unknown_status_is_rejected(self, client, alice, make_card, auth_headers):
        card = make_card(alice)
        response = client.patch(f"{API}/cards/{card.id}/status", json={"status": "LOST"}, headers=auth_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestCardDeletion:
    def test_delete_removes_card_and_its_transactions(self, client, alice, make_card, auth_headers, db_session):
        card = make_card(alice)
        keep = make_card(alice, card_type=CardType.PHYSICAL)
        for c in (card, keep):
            db_session.add(Transaction(
                card_id=c.id, user_id=alice.id, amount_cents=500,
                type=TransactionType.PAYMENT, status=TransactionStatus.COMPLETED,
                description="groceries",
            ))
        db_session.commit()
        card_id = card.id

        response = client.delete(f"{API}/cards/{card_id}", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        db_session.expire_all()
        assert db_session.get(Card, card_id) is None
        assert db_session.query(Transaction).filter(Transaction.card_id == card_id).count() == 0
        assert db_session.query(Transaction).filter(Transaction.card_id == keep.id).count() == 1

    def test_delete_other_users_card_is_forbidden(self, client, bob, make_card, auth_headers, db_session):
        card = make_card(bob)

        response = client.delete(f"{API}/cards/{card.id}", headers=auth_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert db_session.get(Card, card.id) is not None

    def test_delete_missing_card(self, client, auth_headers):
        response = client.delete(f"{API}/cards/12345", headers=auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND
