class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when there is no authenticated caller or login fails."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""
