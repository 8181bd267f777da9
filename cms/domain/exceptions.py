"""Domain-specific exceptions. Pure domain layer: no infrastructure."""


class DomainError(Exception):
    """Base for all domain-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DomainValidationError(DomainError):
    """Raised when posted data violates domain rules (e.g. non-integer owner id)."""


class ContentTypeNotFoundError(DomainError):
    """Raised when a content type slug is not configured."""
