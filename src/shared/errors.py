"""
Shared error messages and exceptions.

User-visible errors must be clear and actionable.
"""
import httpx


class AppErrors:
    """Centralized actionable error messages."""

    FAILURE_HINT = ". Check the logs for more details."

    PROJECT_UNREACHABLE = (
        "Project is not reachable. Check the API URL in Settings."
    )

    URL_INVALID = (
        "API URL is missing or malformed. Check the API URL in Settings."
    )

    REQUEST_TIMEOUT = (
        "Request timed out. The project may be paused or overloaded."
    )

    INTERVAL_INVALID = (
        "Interval must be a whole number of milliseconds between 50 and 86400000."
    )


class AdminApiError(Exception):
    """Logical failure reported by the admin API (e.g. email already registered)."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.message} (HTTP {self.status})"


def format_http_error(error: Exception) -> str:
    """Format an httpx transport error as an actionable message."""
    if isinstance(error, (httpx.UnsupportedProtocol, httpx.InvalidURL)):
        return AppErrors.URL_INVALID

    if isinstance(error, (httpx.ConnectError, httpx.ConnectTimeout)):
        return AppErrors.PROJECT_UNREACHABLE

    if isinstance(error, httpx.TimeoutException):
        return AppErrors.REQUEST_TIMEOUT

    return f"HTTP error: {error}"


def error_message_from_body(body: object, fallback: str) -> str:
    """Pick the human-readable message out of an admin API error body."""
    if isinstance(body, dict):
        for field in ("msg", "message", "error_description", "error"):
            value = body.get(field)
            if isinstance(value, str) and value:
                return value
    return fallback
