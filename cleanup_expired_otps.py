# cleanup_expired_otps.py
"""Delete expired OTP codes. Meant to run periodically, e.g. from cron:

    python cleanup_expired_otps.py
"""
import logging

from zbank.db import SessionLocal
from zbank.services.email_service import get_email_sender
from zbank.services.otp_service import OTPService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def cleanup_expired_otps(session_factory=SessionLocal) -> int:
    db = session_factory()
    try:
        removed = OTPService(db, get_email_sender()).cleanup_expired()
    finally:
        db.close()

    logger.info("Removed %s expired OTP codes", removed)
    return removed


if __name__ == "__main__":
    cleanup_expired_otps()
