class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class StaleExpenseError(ValidationError):
    """Raised when an expense changed between the read and the guarded write."""


class NotFoundError(DomainError):
    """Raised when a referenced expense, category or user does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks ownership or role for an action."""
