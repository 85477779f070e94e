# zbank/services/otp_service.py
import logging
import secrets
import string
from datetime import datetime, timedelta

from fastapi import Depends
from sqlalchemy.orm import Session

from zbank.core.config import settings
from zbank.core.exceptions import InvalidOrExpiredOTP
from zbank.db import get_db
from zbank.models.otp import OTP, OTPPurpose
from zbank.services.email_service import EmailSender, get_email_sender, send_otp_email

logger = logging.getLogger(__name__)


def generate_otp_code(length: int = None) -> str:
    """Generate a random numeric OTP code"""
    return "".join(secrets.choice(string.digits) for _ in range(length or settings.OTP_LENGTH))


class OTPService:
    def __init__(self, db: Session, email_sender: EmailSender):
        self.db = db
        self.email_sender = email_sender

    def generate(self, email: str, purpose: OTPPurpose) -> str:
        """Persist a fresh code for (email, purpose) and email it. Returns the code."""
        purpose = OTPPurpose(purpose)
        now = datetime.utcnow()

        if settings.OTP_INVALIDATE_PREVIOUS:
            self.db.query(OTP).filter(
                OTP.email == email,
                OTP.purpose == purpose,
                OTP.used == False,  # noqa: E712
            ).update({"used": True}, synchronize_session=False)

        code = generate_otp_code()
        otp = OTP(
            email=email,
            code=code,
            purpose=purpose,
            created_at=now,
            expires_at=now + timedelta(minutes=settings.OTP_EXPIRY_MINUTES),
        )
        self.db.add(otp)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if not send_otp_email(self.email_sender, email, code, purpose.value):
            logger.warning("OTP email to %s failed (purpose=%s)", email, purpose.value)
            if not settings.is_production:
                logger.info("OTP for %s: %s (purpose=%s)", email, code, purpose.value)

        return code

    def verify(self, email: str, code: str, purpose: OTPPurpose, commit: bool = True) -> OTP:
        """Consume the newest matching unused, unexpired code.

        With ``commit=False`` the consumption is only flushed so that it becomes
        part of the caller's unit of work and is undone by its rollback.
        """
        purpose = OTPPurpose(purpose)
        otp = (
            self.db.query(OTP)
            .filter(
                OTP.email == email,
                OTP.code == code,
                OTP.purpose == purpose,
                OTP.used == False,  # noqa: E712
                OTP.expires_at > datetime.utcnow(),
            )
            .order_by(OTP.created_at.desc(), OTP.id.desc())
            .with_for_update()
            .first()
        )
        if otp is None:
            raise InvalidOrExpiredOTP()

        otp.used = True
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        return otp

    def cleanup_expired(self) -> int:
        """Delete expired codes. Not scheduled; run by cleanup_expired_otps.py."""
        expired_count = (
            self.db.query(OTP)
            .filter(OTP.expires_at < datetime.utcnow())
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return expired_count


def get_otp_service(
    db: Session = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
) -> OTPService:
    return OTPService(db, email_sender)
