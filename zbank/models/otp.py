# zbank/models/otp.py
import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, func

from zbank.db.base_class import Base


class OTPPurpose(str, enum.Enum):
    SIGNUP = "signup"
    SIGNIN = "signin"
    TRANSFER = "transfer"


class OTP(Base):
    __tablename__ = "otps"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, nullable=False, index=True)
    code = Column(String(6), nullable=False)
    purpose = Column(
        Enum(OTPPurpose, name="otppurpose", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    used = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
