"""Application-layer exceptions. Do not reuse domain exceptions."""


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ContentNotFoundError(ApplicationError):
    """Raised when the record to edit does not exist."""


class PersistenceFailureError(ApplicationError):
    """Raised by repositories when the record store rejects a write. Never retried here."""
