# zbank/api/auth.py
from fastapi import APIRouter, Depends, status

from zbank.core.security import get_current_user
from zbank.models.user import User
from zbank.schemas.user import (
    CredentialsIn,
    RegisterResponse,
    SignInRequest,
    Token,
    UserCreate,
    UserProfile,
)
from zbank.services.user_service import UserService, get_user_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, users: UserService = Depends(get_user_service)):
    """Create an account with a signup OTP previously sent to the email."""
    user = users.register(user_in.name, user_in.email, user_in.password, user_in.otp)
    return {"message": "User created successfully", "user": user}


@router.post("/verify-credentials")
def verify_credentials(credentials: CredentialsIn, users: UserService = Depends(get_user_service)):
    """Check email and password before a signin OTP is requested."""
    users.authenticate(credentials.email, credentials.password)
    return {"valid": True}


@router.post("/signin", response_model=Token)
def sign_in(request: SignInRequest, users: UserService = Depends(get_user_service)):
    user, token = users.sign_in(request.email, request.password, request.otp)
    return {"access_token": token, "token_type": "bearer", "user": user}


@router.get("/me", response_model=UserProfile)
def me(current_user: User = Depends(get_current_user)):
    return current_user
