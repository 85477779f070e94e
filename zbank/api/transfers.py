# zbank/api/transfers.py
from fastapi import APIRouter, Depends, Query, status
from pydantic import EmailStr

from zbank.core.security import get_current_user
from zbank.models.user import User
from zbank.schemas.transfer import RecipientCards, TransferCreate, TransferResult
from zbank.services.transfer_service import TransferEngine, get_transfer_engine
from zbank.services.user_service import UserService, get_user_service

router = APIRouter(prefix="/transfers", tags=["Transfers"])


@router.post("", response_model=TransferResult, status_code=status.HTTP_201_CREATED)
def create_transfer(
    transfer_in: TransferCreate,
    current_user: User = Depends(get_current_user),
    transfers: TransferEngine = Depends(get_transfer_engine),
):
    """OTP-gated transfer from one of the caller's cards to another user."""
    return transfers.transfer(
        current_user,
        card_id=transfer_in.card_id,
        recipient_email=transfer_in.recipient_email,
        amount=transfer_in.amount,
        description=transfer_in.description,
        otp=transfer_in.otp,
        recipient_card_id=transfer_in.recipient_card_id,
    )


@router.get("/recipient-cards", response_model=RecipientCards)
def recipient_cards(
    email: EmailStr = Query(...),
    current_user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    user, cards = users.recipient_cards(email)
    return {"user": user, "cards": cards}
