"""Exception types raised at the pipeline's external-call boundaries."""

from enum import Enum


class ErrorKind(str, Enum):
    """How a failed external call should be treated by the caller."""

    TRANSIENT = "transient"
    FATAL = "fatal"


class ConfigurationError(Exception):
    """Run settings are unusable; raised before any work starts."""


class NetworkError(Exception):
    """An HTTP call failed.

    Attributes:
        kind: ``ErrorKind.TRANSIENT`` for resets, timeouts, 429 and 5xx
            responses; ``ErrorKind.FATAL`` for everything else.
        url: The URL that was requested.
        status_code: HTTP status when a response was received.
    """

    def __init__(self, message: str, kind: ErrorKind, url: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.url = url
        self.status_code = status_code

class QuoteNotFoundError(ValueError):
    """The quote source returned no price fields for a symbol."""


class ResponseParseError(ValueError):
    """A backend completion did not contain a decodable JSON object."""

    def __init__(self, raw_text: str) -> None:
        self.preview = (raw_text or "")[:50]
        super().__init__(f"JSON Parse Failed: {self.preview}...")
