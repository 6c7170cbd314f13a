"""Error taxonomy shared by every layer."""


class StationRegistryError(Exception):
    """Base class for all errors raised by the station registry."""


class ValidationError(StationRegistryError):
    """Submitted data is invalid. Raised before any write happens."""

    def __init__(self, message: str, field_errors: dict[str, str] | None = None) -> None:
        """Initialize with a summary message and per-field messages."""
        super().__init__(message)
        self.field_errors = field_errors or {}


class NotFoundError(StationRegistryError):
    """A referenced document does not exist."""


class StorageError(StationRegistryError):
    """A store read, write or transaction failed. Nothing was committed."""


class ExternalApiError(StationRegistryError):
    """The routing API answered with a non-2xx status or an unusable payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize with the HTTP status code when one is known."""
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(ExternalApiError):
    """The routing API answered HTTP 429."""

    def __init__(self, message: str = "Rate limit exceeded") -> None:
        """Initialize with the 429 status code."""
        super().__init__(message, status_code=429)


class RequestTimeoutError(StationRegistryError):
    """The distance lookup did not finish within its time budget."""
