"""purl: a private, curl-like URL fetcher."""

import logging

from purl.fetcher import build_client, check_transport, fetch_url
from purl.models import FetchResult, GateDecision
from purl.sanitizer import sanitize_url

__version__ = "0.1.0"

# Records stay silent unless the application configures logging (--verbose)
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "sanitize_url",
    "check_transport",
    "build_client",
    "fetch_url",
    "FetchResult",
    "GateDecision",
    "__version__",
]
