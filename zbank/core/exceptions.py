# zbank/core/exceptions.py
"""Domain errors raised by the services and mapped to HTTP responses in ``zbank.main``."""


class BankingError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class Unauthorized(BankingError):
    status_code = 401
    message = "Unauthorized"


class Forbidden(BankingError):
    status_code = 403
    message = "Forbidden"


class NotFound(BankingError):
    status_code = 404
    message = "Not found"


class InvalidInput(BankingError):
    status_code = 400
    message = "Invalid input"


class InvalidState(BankingError):
    status_code = 400
    message = "Invalid state"


class InsufficientBalance(BankingError):
    status_code = 400
    message = "Insufficient balance"


class InvalidOrExpiredOTP(BankingError):
    status_code = 400
    message = "Invalid or expired OTP"


# Raised by the transfer flow; same contract as InvalidOrExpiredOTP.
InvalidOTP = InvalidOrExpiredOTP


class SelfTransfer(BankingError):
    status_code = 400
    message = "Cannot transfer to yourself"


class InvalidRecipientCard(BankingError):
    status_code = 400
    message = "Selected recipient card is not available"


class InternalError(BankingError):
    status_code = 500
    message = "Internal server error"
