"""Security-layer exceptions. Typed, no HTTP."""


class SecurityError(Exception):
    """Base for all security-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AccessControlError(SecurityError):
    """Raised when the current user may not perform the action (e.g. change ownership)."""


class SecurityViolationError(SecurityError):
    """Raised when a request tampers with record identity (spoofed id)."""
