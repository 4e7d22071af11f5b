"""Error taxonomy shared by the chat and document ingestion cores."""


class AssistError(Exception):
    """Base exception for all client-side failures."""


class InputValidationError(AssistError):
    """Raised for bad input before any network call is made."""


class FileTooLargeError(InputValidationError):
    """Raised when an uploaded file exceeds the configured maximum size."""


class ServiceConnectionError(AssistError):
    """Raised when an external service cannot be reached or times out."""


class ProtocolError(AssistError):
    """Raised when a response has an unexpected shape."""


class RemoteServiceError(AssistError):
    """Raised when an external service reports a failure."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DocumentNotFoundError(AssistError):
    """Raised when a document id is not tracked."""
