# zbank/schemas/otp.py
from typing import Optional

from pydantic import EmailStr, model_validator

from zbank.models.otp import OTPPurpose
from zbank.schemas.base import APIModel


class OTPGenerateRequest(APIModel):
    purpose: OTPPurpose = OTPPurpose.TRANSFER
    email: Optional[EmailStr] = None


class OTPVerifyRequest(APIModel):
    code: Optional[str] = None
    otp: Optional[str] = None
    purpose: OTPPurpose = OTPPurpose.TRANSFER
    email: Optional[EmailStr] = None

    @model_validator(mode="after")
    def require_code(self):
        if not (self.code or self.otp):
            raise ValueError("OTP code is required")
        return self

    @property
    def value(self) -> str:
        return self.code or self.otp


class OTPGenerateResponse(APIModel):
    message: str
    otp: Optional[str] = None
