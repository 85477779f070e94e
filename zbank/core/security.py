# zbank/core/security.py
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from zbank.core.config import settings
from zbank.core.exceptions import Unauthorized
from zbank.db import get_db
from zbank.models.user import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Missing credentials are reported as 401 by get_current_user, not by the scheme
bearer_scheme = HTTPBearer(auto_error=False)


# ---------------- Password utils ---------------- #
def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


# ---------------- PIN utils ---------------- #
def get_pin_hash(pin: str) -> str:
    """Hash a 4-digit card PIN using bcrypt"""
    if len(pin) != 4 or not pin.isdigit():
        raise ValueError("PIN must be exactly 4 digits")

    hashed = bcrypt.hashpw(pin.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_pin(plain_pin: str, hashed_pin: str) -> bool:
    if len(plain_pin) != 4 or not plain_pin.isdigit():
        return False
    return bcrypt.checkpw(plain_pin.encode("utf-8"), hashed_pin.encode("utf-8"))


# ---------------- JWT utils ---------------- #
def create_access_token(data: dict, expires_delta: Optional[int] = None) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + timedelta(
        minutes=(expires_delta or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str):
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


# ---------------- User dependencies ---------------- #
def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Resolve the session user, or None when no valid bearer token is present."""
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    if payload is None or "sub" not in payload:
        return None

    return db.query(User).filter(User.email == payload["sub"]).first()


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise Unauthorized("Could not validate credentials")
    return user
