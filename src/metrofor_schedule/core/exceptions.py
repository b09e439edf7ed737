"""Custom exceptions for the Metrofor schedule scraper."""


class MetroforError(Exception):
    """Base exception for Metrofor scraper errors."""

    pass


class TransportError(MetroforError):
    """Raised when an upstream HTTP call fails, times out or returns an error status."""

    def __init__(self, operation: str, message: str, status_code: int | None = None):
        self.operation = operation
        self.status_code = status_code
        super().__init__(f"{operation}: {message}")


class StaleSessionError(TransportError):
    """Raised when the upstream site rejects the cached CSRF token or cookies."""

    pass


class ParseError(MetroforError):
    """Raised when a successful response lacks an expected element."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation}: {message}")


class ValidationError(MetroforError):
    """Raised when input validation fails."""

    pass
