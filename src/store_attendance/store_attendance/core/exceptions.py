class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class FlowError(DomainError):
    """Raised when an attendance action is not allowed in the current step."""


class CaptureUnavailableError(DomainError):
    """Raised when the camera could not be acquired."""


class AnalysisError(DomainError):
    """Raised when the audit analysis service fails. The caller may retry."""
