"""Error taxonomy shared by the ledger and the HTTP layer."""

from http import HTTPStatus


class LedgerError(Exception):
    """Base error; ``status`` is the HTTP status the API responds with."""

    status = HTTPStatus.INTERNAL_SERVER_ERROR
    message = "Request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class ValidationError(LedgerError):
    status = HTTPStatus.BAD_REQUEST
    message = "Invalid request"


class MissingField(ValidationError):
    message = "Missing required fields"


class InvalidAmount(ValidationError):
    message = "Amount must be between 500 and 1,000,000 USDT"


class InvalidTerm(ValidationError):
    message = "Lock period must be a whole number of months between 3 and 24"


class InvalidMode(ValidationError):
    message = "Compound type must be 'monthly' or 'simple'"


class InvalidPeriod(ValidationError):
    message = "Accrual period must be a positive fraction of a year"


class MissingReference(ValidationError):
    message = "Transaction hash is required"


class DuplicateEmail(ValidationError):
    message = "User already exists"


class CapacityExceeded(ValidationError):
    message = "Maximum user limit reached"


class NotFoundError(LedgerError):
    status = HTTPStatus.NOT_FOUND
    message = "Not found"


class AccountNotFound(NotFoundError):
    message = "User not found"


class AuthError(LedgerError):
    status = HTTPStatus.UNAUTHORIZED
    message = "Authentication failed"


class InvalidCredential(AuthError):
    message = "Invalid password"


class AccountDisabled(AuthError):
    message = "Account is deactivated"


class PersistenceError(LedgerError):
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    message = "Failed to save data"
