# zbank/api/otp.py
from typing import Optional

from fastapi import APIRouter, Depends

from zbank.core.config import settings
from zbank.core.exceptions import Unauthorized
from zbank.core.security import get_optional_user
from zbank.models.user import User
from zbank.schemas.otp import OTPGenerateRequest, OTPGenerateResponse, OTPVerifyRequest
from zbank.services.otp_service import OTPService, get_otp_service

router = APIRouter(prefix="/otp", tags=["OTP"])


def _resolve_email(email: Optional[str], current_user: Optional[User]) -> str:
    if email:
        return email
    if current_user is None:
        raise Unauthorized()
    return current_user.email


@router.post("/generate", response_model=OTPGenerateResponse, response_model_exclude_none=True)
def generate_otp(
    request: OTPGenerateRequest,
    current_user: Optional[User] = Depends(get_optional_user),
    otps: OTPService = Depends(get_otp_service),
):
    """Send a code to ``email``, or to the session user when no email is given."""
    email = _resolve_email(request.email, current_user)
    code = otps.generate(email, request.purpose)

    response = {"message": "OTP sent successfully"}
    if not settings.is_production:
        response["otp"] = code
    return response


@router.post("/verify")
def verify_otp(
    request: OTPVerifyRequest,
    current_user: Optional[User] = Depends(get_optional_user),
    otps: OTPService = Depends(get_otp_service),
):
    email = _resolve_email(request.email, current_user)
    otps.verify(email, request.value, request.purpose)
    return {"message": "OTP verified successfully"}
