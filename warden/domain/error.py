"""Domain layer errors.

Every failure an engine operation can surface carries an HTTP-style status
class. The routing layer serializes them; the domain never builds responses.
"""


class DomainError(Exception):
    """Base domain error."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(DomainError):
    """Missing or malformed input, or an operation in the wrong state."""

    status_code = 400


class ConflictError(DomainError):
    """Duplicate email, phone or account."""

    status_code = 400


class NotFoundError(DomainError):
    """No such account or challenge."""

    status_code = 404


class AuthenticationError(DomainError):
    """Bad password, OTP or confirmation code.

    401 by default; verification and reset code failures use 400.
    """

    status_code = 401


class RateLimitedError(DomainError):
    """Provider or local throttling. Retryable by the caller, never by us."""

    status_code = 429


class DependencyError(DomainError):
    """Provider misconfigured or failed in an unmapped way."""

    status_code = 500


class InvariantViolationError(DomainError):
    """An account transition would leave the account unable to authenticate."""

    status_code = 500
