class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationRequired(DomainError):
    """Raised when a mutation is attempted without an active session."""


class GatewayError(DomainError):
    """Raised with the remote gateway's own message when a call fails."""


class CompensationFailure(DomainError):
    """Raised when rolling back a half-finished sign up fails.

    The account created by the gateway is left without a profile.
    """
