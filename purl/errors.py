"""Error taxonomy for purl.

Every failure is terminal for an invocation.  The core raises one of the
classes below and the CLI maps it to a message and :attr:`exit_code`.
"""

from __future__ import annotations


class PurlError(Exception):
    """Base class for every error purl reports to the user."""

    exit_code: int = 1


class InsecureSchemeError(PurlError):
    """Plain ``http://`` target without ``--unsecured``."""

    exit_code = 1

    def __init__(self, url: str) -> None:
        super().__init__("HTTP is insecure. Use --unsecured (-u) to allow it.")
        self.url = url


class InvalidUrlError(PurlError):
    """The input does not parse as a URL, even after scheme defaulting."""

    exit_code = 2

    def __init__(self, url: str, reason: str = "") -> None:
        message = f"Invalid URL: {url}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.url = url
        self.reason = reason


class TransportError(PurlError):
    """Building the HTTP client or performing the request failed."""

    exit_code = 3


class DecodeError(PurlError):
    """The response body is not valid text in its declared charset."""

    exit_code = 4
