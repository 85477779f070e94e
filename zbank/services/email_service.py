# zbank/services/email_service.py
import html
import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from zbank.core.config import settings

logger = logging.getLogger(__name__)


class EmailSender:
    """Delivery interface used by the services. ``send`` reports success as a bool."""

    def send(self, to_email: str, subject: str, html_body: str, text_body: Optional[str] = None) -> bool:
        raise NotImplementedError


class SMTPEmailSender(EmailSender):
    def __init__(self, host=None, port=None, user=None, password=None, from_email=None,
                 use_ssl=None, timeout=None):
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.user = user or settings.SMTP_USER
        self.password = password or settings.SMTP_PASSWORD
        self.from_email = from_email or settings.FROM_EMAIL or self.user
        self.use_ssl = settings.SMTP_USE_SSL if use_ssl is None else use_ssl
        self.timeout = timeout or settings.SMTP_TIMEOUT

    def send(self, to_email: str, subject: str, html_body: str, text_body: Optional[str] = None) -> bool:
        if not self.host or not self.user or not self.password:
            logger.warning("SMTP not configured; skipping email to %s", to_email)
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_email
        msg["To"] = to_email
        msg.attach(MIMEText(text_body or "Please view this email in an HTML-compatible email client.", "plain"))
        msg.attach(MIMEText(html_body, "html"))

        try:
            if self.use_ssl:
                with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as server:
                    server.login(self.user, self.password)
                    server.sendmail(self.from_email, [to_email], msg.as_string())
            else:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                    server.starttls()
                    server.login(self.user, self.password)
                    server.sendmail(self.from_email, [to_email], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("Failed to send email to %s via %s:%s: %s", to_email, self.host, self.port, e)
            return False

        logger.info("Email sent to %s (%s)", to_email, subject)
        return True


_default_sender = SMTPEmailSender()


def get_email_sender() -> EmailSender:
    return _default_sender


# ---------------- Templates ---------------- #
def _wrap(title: str, inner: str) -> str:
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: #2563eb;">{title}</h2>
      {inner}
      <p>Best regards,<br>The ZBank Team</p>
    </div>
    """


def _mask(card_number: str) -> str:
    return f"**** **** **** {card_number[-4:]}"


PURPOSE_DISPLAY = {
    "signup": "Email Verification",
    "signin": "Sign-in Verification",
    "transfer": "Transfer Authorization",
}


def send_otp_email(sender: EmailSender, email: str, code: str, purpose: str) -> bool:
    purpose_display = PURPOSE_DISPLAY.get(purpose, "Verification")
    body = _wrap(purpose_display, f"""
      <p>Use the code below to complete your {purpose_display.lower()}:</p>
      <p style="font-size:32px; font-weight:bold; color:#2563eb; letter-spacing:5px;">{code}</p>
      <p>This code will expire in {settings.OTP_EXPIRY_MINUTES} minutes.</p>
      <p style="color:#999; font-size:12px;">If you didn't request this, please ignore this email.</p>
    """)
    return sender.send(email, f"{purpose_display} Code - ZBank", body)


def send_welcome_email(sender: EmailSender, email: str, name: str) -> bool:
    body = _wrap(f"Welcome to ZBank, {html.escape(name)}!", """
      <p>Thank you for joining ZBank. Your account has been successfully created.</p>
      <p>You can now:</p>
      <ul>
        <li>Create virtual and physical cards</li>
        <li>Make secure payments</li>
        <li>Transfer money to other users</li>
        <li>Monitor your transactions</li>
      </ul>
    """)
    return sender.send(email, "Welcome to ZBank!", body)


def send_transaction_notification(sender: EmailSender, email: str, name: str,
                                  transaction_type: str, amount: float, card_number: str) -> bool:
    body = _wrap("Transaction Notification", f"""
      <p>Dear {html.escape(name)},</p>
      <p>A transaction has been processed on your ZBank account:</p>
      <div style="background-color: #f3f4f6; padding: 20px; border-radius: 8px; margin: 20px 0;">
        <p><strong>Transaction Type:</strong> {transaction_type}</p>
        <p><strong>Amount:</strong> ${amount:,.2f}</p>
        <p><strong>Card:</strong> {_mask(card_number)}</p>
        <p><strong>Date:</strong> {datetime.utcnow():%Y-%m-%d %H:%M} UTC</p>
      </div>
      <p>If you did not authorize this transaction, please contact our support team immediately.</p>
    """)
    return sender.send(email, f"Transaction Notification - {transaction_type}", body)


def send_card_status_notification(sender: EmailSender, email: str, name: str,
                                  card_number: str, old_status: str, new_status: str) -> bool:
    body = _wrap("Card Status Update", f"""
      <p>Dear {html.escape(name)},</p>
      <p>Your card status has been updated:</p>
      <div style="background-color: #f3f4f6; padding: 20px; border-radius: 8px; margin: 20px 0;">
        <p><strong>Card:</strong> {_mask(card_number)}</p>
        <p><strong>Previous Status:</strong> {old_status}</p>
        <p><strong>New Status:</strong> {new_status}</p>
      </div>
      <p>If you have any questions about this change, please contact our support team.</p>
    """)
    return sender.send(email, f"Card Status Changed - {card_number[-4:]}", body)
