"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Local input failed validation and must not reach the network"""

    pass


class InvalidIbanError(ValidationError):
    """IBAN is empty or does not match the accepted format"""

    pass


class InvalidAmountError(ValidationError):
    """Amount is empty, violates the entry mask, or is not a number"""

    pass


class MissingFieldError(ValidationError):
    """A required form field is blank"""

    pass


class RemoteServiceError(DomainException):
    """Remote banking service returned an error or is unavailable"""

    pass


class TransferRejectedError(RemoteServiceError):
    """Remote service answered a transfer with success=false"""

    def __init__(self, message: str | None = None):
        super().__init__(message or "Transfer failed")
        self.service_message = message


class AuthenticationError(RemoteServiceError):
    """Login was refused by the remote service"""

    pass


class RegistrationError(RemoteServiceError):
    """Account registration was refused by the remote service"""

    pass


class SessionError(DomainException):
    """Session lifecycle was driven into an invalid transition"""

    pass


class SessionAlreadyActiveError(SessionError):
    """A session is already active on this client"""

    pass


class NoActiveSessionError(SessionError):
    """Operation requires an active session"""

    pass
