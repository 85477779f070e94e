# zbank/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from zbank.schemas.base import APIModel


class UserCreate(APIModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    otp: str = Field(..., min_length=1)


class CredentialsIn(APIModel):
    email: EmailStr
    password: str


class SignInRequest(CredentialsIn):
    otp: str = Field(..., min_length=1)


class DeleteAccountRequest(APIModel):
    password: Optional[str] = None


class UserOut(APIModel):
    id: int
    email: EmailStr
    name: Optional[str] = None


class UserProfile(UserOut):
    balance: float
    created_at: Optional[datetime] = None


class RegisterResponse(APIModel):
    message: str
    user: UserOut


class Token(APIModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
