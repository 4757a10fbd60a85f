class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConfigurationError(DomainError):
    """Raised when the reference zone is missing or invalid."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class PositionError(Exception):
    """Base for failures reported by a position source."""


class PositionPermissionDenied(PositionError):
    """The user refused access to their location."""


class PositionUnavailable(PositionError):
    """No position could be determined (e.g. no hardware, no signal)."""


class PositionTimeout(PositionError):
    """The position source did not answer in time."""
