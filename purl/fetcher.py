"""Transport gate and the single constrained HTTP GET."""

from __future__ import annotations

import codecs
import logging
from typing import List, Optional, Tuple
from urllib.parse import urlsplit

import httpx

from purl.config import settings
from purl.errors import DecodeError, InsecureSchemeError, TransportError
from purl.models import FetchResult, GateDecision

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Transport gate
# ---------------------------------------------------------------------------

def check_transport(url: str, allow_insecure: bool) -> GateDecision:
    """Decide whether *url* may be fetched.

    Raises:
        InsecureSchemeError: If *url* is plain ``http://`` and
            *allow_insecure* is false.
    """
    scheme = urlsplit(url).scheme
    insecure = scheme == "http"
    if insecure and not allow_insecure:
        logger.debug("Blocked insecure request to %s", url)
        raise InsecureSchemeError(url)
    return GateDecision(url=url, scheme=scheme, insecure=insecure)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _render_header_value(value: bytes) -> str:
    """Return *value* as text, or the binary placeholder if it is not printable."""
    try:
        text = value.decode("ascii")
    except UnicodeDecodeError:
        return settings.binary_header_placeholder
    if all(ch == "\t" or ch.isprintable() for ch in text):
        return text
    return settings.binary_header_placeholder


def _collect_headers(response: httpx.Response) -> List[Tuple[str, str]]:
    """Return the response headers in wire order as printable ``(name, value)`` pairs."""
    return [
        (name.decode("latin-1"), _render_header_value(value))
        for name, value in response.headers.raw
    ]


def _decode_body(response: httpx.Response) -> str:
    """Strictly decode the body using the declared charset (UTF-8 by default).

    Unlike ``response.text``, invalid bytes raise instead of being replaced.
    """
    encoding = response.charset_encoding or "utf-8"
    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise DecodeError(
            f"Failed to read response body from {response.url}: unknown charset {encoding!r}"
        ) from exc
    try:
        return response.content.decode(encoding)
    except UnicodeDecodeError as exc:
        raise DecodeError(
            f"Failed to read response body from {response.url}: not valid {encoding} text"
        ) from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_client(proxy: Optional[str] = None) -> httpx.Client:
    """Create the constrained :class:`httpx.Client` used for every fetch.

    The policy is fixed: ``settings.request_timeout`` seconds,
    at most ``settings.max_redirects`` redirects, TLS verification always on
    and a curl-like user agent.  *proxy* is handed to httpx verbatim and
    applies to all traffic; proxy and certificate environment variables are
    ignored.

    Raises:
        TransportError: If httpx rejects the configuration (e.g. a malformed
            or unsupported proxy URL).
    """
    try:
        return httpx.Client(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.request_timeout,
            follow_redirects=True,
            max_redirects=settings.max_redirects,
            verify=True,
            proxy=proxy,
            trust_env=False,
        )
    except (httpx.InvalidURL, ValueError, ImportError) as exc:
        raise TransportError(f"Failed to build HTTP client: {exc}") from exc


def fetch_url(
    url: str,
    *,
    allow_insecure: bool = False,
    proxy: Optional[str] = None,
) -> FetchResult:
    """Gate, then fetch *url* once and return a :class:`FetchResult`.

    No retries are made and non-2xx responses are returned as-is.

    Raises:
        InsecureSchemeError: Plain HTTP without *allow_insecure*; no request
            is made.
        TransportError: Client configuration or request failure.
        DecodeError: The body is not valid text.
    """
    if check_transport(url, allow_insecure).insecure:
        logger.warning("Insecure HTTP request to %s", url)

    with build_client(proxy) as client:
        try:
            response = client.get(url, headers=settings.default_headers)
        except httpx.TooManyRedirects as exc:
            raise TransportError(
                f"Failed to fetch URL: {url} (more than {settings.max_redirects} redirects)"
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"Failed to fetch URL: {url} ({exc})") from exc

        logger.debug("GET %s -> HTTP %s", response.url, response.status_code)
        headers = _collect_headers(response)
        text = _decode_body(response)

    return FetchResult(
        url=url,
        final_url=str(response.url),
        status_code=response.status_code,
        text=text,
        headers=headers,
    )
