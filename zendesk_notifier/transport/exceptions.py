"""Custom exceptions for Zendesk and tracker HTTP calls."""


class TransportError(Exception):
    """Base exception for all transport errors.

    The dispatcher catches this per document and records the failure in the
    dispatch result; nothing in the notifier retries.
    """

    pass


class TransportConfigurationError(TransportError):
    """The transport cannot be used with the current configuration.

    Raised for a missing Zendesk URL or invalid client settings.
    """

    pass


class TransportHTTPError(TransportError):
    """HTTP request failed or returned a 4xx/5xx status."""

    def __init__(self, message: str, status_code: int, url: str) -> None:
        """
        Args:
            message: Human-readable error message
            status_code: HTTP status code, 0 when no response was received
            url: URL that failed
        """
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class TransportTimeoutError(TransportError):
    """HTTP request did not complete within the configured timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class AttachmentUploadError(TransportError):
    """An attachment could not be fetched from the tracker or uploaded."""

    def __init__(self, message: str, filename: str) -> None:
        super().__init__(message)
        self.filename = filename
