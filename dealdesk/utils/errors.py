"""
Error types raised by the data-acquisition layer.

Scoring and risk classification never raise; only configuration checks,
network calls and payload parsing do.
"""


class DealDeskError(Exception):
    """Base class for all DealDesk errors."""


class ConfigurationError(DealDeskError, ValueError):
    """A required credential is missing or still set to its placeholder."""


class ProviderError(DealDeskError):
    """
    An external API answered with a failure.

    Covers non-success HTTP statuses, explicit error payloads and
    rate-limit notices.
    """

    def __init__(self, message: str, provider: str = "unknown", status_code: int = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class ResponseParseError(DealDeskError):
    """A response body did not contain the expected structured payload."""
