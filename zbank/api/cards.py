# zbank/api/cards.py
from typing import List

from fastapi import APIRouter, Depends, status

from zbank.core.security import get_current_user
from zbank.models.user import User
from zbank.schemas.card import CardCreate, CardOut, CardStatusUpdate, CardWithTransactions
from zbank.services.card_service import CardLedger, get_card_ledger

router = APIRouter(prefix="/cards", tags=["Cards"])


@router.get("", response_model=List[CardWithTransactions])
def list_cards(
    current_user: User = Depends(get_current_user),
    cards: CardLedger = Depends(get_card_ledger),
):
    return cards.list_for_user(current_user.id)


@router.post("", response_model=CardOut, status_code=status.HTTP_201_CREATED)
def create_card(
    card_in: CardCreate,
    current_user: User = Depends(get_current_user),
    cards: CardLedger = Depends(get_card_ledger),
):
    return cards.create(current_user, card_in)


@router.delete("/{card_id}")
def delete_card(
    card_id: int,
    current_user: User = Depends(get_current_user),
    cards: CardLedger = Depends(get_card_ledger),
):
    cards.delete(card_id, current_user.id)
    return {"message": "Card deleted successfully"}


@router.patch("/{card_id}/status", response_model=CardOut)
def update_card_status(
    card_id: int,
    status_in: CardStatusUpdate,
    current_user: User = Depends(get_current_user),
    cards: CardLedger = Depends(get_card_ledger),
):
    return cards.set_status(card_id, current_user.id, status_in.status)
