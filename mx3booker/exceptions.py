"""Exceptions raised by the MX3 booking client.

Booking outcomes such as running out of credits or a duplicate reservation are
not exceptions; they come back as ``BookingFailure`` results.
"""


class MX3Error(Exception):
    """Base exception for MX3 client errors."""

    pass


class ConfigurationError(MX3Error):
    """Credentials or site settings are missing or invalid."""

    pass


class AuthenticationError(MX3Error):
    """Login did not produce a usable session."""

    pass


class SessionExpiredError(AuthenticationError):
    """The session expired again right after a fresh login."""

    pass


class NetworkError(MX3Error):
    """Transport failure or HTTP error status from the booking site."""

    pass


class ParseError(MX3Error):
    """Response content did not match any known shape."""

    def __init__(self, message: str, snippet: str = ""):
        super().__init__(message)
        self.snippet = snippet
