"""Security-layer exceptions. Typed, no HTTP."""


class SecurityError(Exception):
    """Base for all security-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthenticationError(SecurityError):
    """Raised when the caller presents no internal-service credential."""


class AuthorizationError(SecurityError):
    """Raised when the presented internal-service credential does not match."""
