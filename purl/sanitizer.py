"""URL normalisation: default the scheme and strip tracking parameters."""

from __future__ import annotations

import ipaddress
import logging
from typing import Iterable, List, Optional, Tuple
from urllib.parse import SplitResult, parse_qsl, urlencode, urlsplit, urlunsplit

from purl.config import settings
from purl.errors import InvalidUrlError

logger = logging.getLogger(__name__)

_SUPPORTED_PREFIXES = ("http://", "https://")

# WHATWG forbidden host code points (plus whitespace)
_FORBIDDEN_HOST_CHARS = frozenset(" \t\n\r#%/:<>?@[\\]^|")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _ensure_scheme(raw: str) -> str:
    """Prefix *raw* with the default scheme unless it already has http(s)."""
    if raw.lower().startswith(_SUPPORTED_PREFIXES):
        return raw
    return f"{settings.default_scheme}://{raw}"


def _check_host(parts: SplitResult, url: str) -> None:
    """Raise :class:`InvalidUrlError` unless *parts* carries a usable host."""
    hostport = parts.netloc.rpartition("@")[2]

    if hostport.startswith("["):
        try:
            ipaddress.IPv6Address(parts.hostname or "")
        except ValueError:
            raise InvalidUrlError(url, "invalid IPv6 address") from None
    else:
        host = hostport.split(":", 1)[0]
        if not host:
            raise InvalidUrlError(url, "empty host")
        if any(ch in _FORBIDDEN_HOST_CHARS or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in host):
            raise InvalidUrlError(url, "invalid character in host")
        if not host.isascii():
            try:
                host.encode("idna")
            except UnicodeError:
                raise InvalidUrlError(url, "invalid international domain name") from None

    try:
        parts.port
    except ValueError:
        raise InvalidUrlError(url, "invalid port") from None


def _normalize_netloc(netloc: str) -> str:
    """Lowercase an ASCII host and drop an empty port (``example.com:``)."""
    userinfo, at, hostport = netloc.rpartition("@")
    if hostport.startswith("["):
        end = hostport.index("]") + 1
        host, port = hostport[:end], hostport[end:].lstrip(":")
    else:
        host, _, port = hostport.partition(":")
    if host.isascii():
        host = host.lower()
    if port:
        host = f"{host}:{port}"
    return f"{userinfo}{at}{host}"


def is_tracking_param(
    key: str,
    tracking_keys: Iterable[str],
    tracking_prefixes: Tuple[str, ...],
) -> bool:
    """Return ``True`` if query *key* is on the tracking denylist.

    The match is case-insensitive and looks at the key only.
    """
    lowered = key.lower()
    return lowered in tracking_keys or lowered.startswith(tracking_prefixes)


def strip_tracking_params(
    query: str,
    tracking_keys: Optional[Iterable[str]] = None,
    tracking_prefixes: Optional[Tuple[str, ...]] = None,
) -> str:
    """Drop denylisted pairs from *query* and re-encode the rest.

    Order of the remaining pairs is preserved.  Returns an empty string when
    nothing is left.
    """
    keys = frozenset(tracking_keys if tracking_keys is not None else settings.tracking_keys)
    prefixes = tuple(
        tracking_prefixes if tracking_prefixes is not None else settings.tracking_prefixes
    )

    kept: List[Tuple[str, str]] = []
    for key, value in parse_qsl(query, keep_blank_values=True):
        if is_tracking_param(key, keys, prefixes):
            logger.debug("Dropping tracking parameter %r", key)
            continue
        kept.append((key, value))
    return urlencode(kept)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def sanitize_url(
    raw: str,
    tracking_keys: Optional[Iterable[str]] = None,
    tracking_prefixes: Optional[Tuple[str, ...]] = None,
) -> str:
    """Normalise *raw* into a sanitized URL.

    Steps:
    1. Prefix ``https://`` when no ``http://``/``https://`` scheme is given.
    2. Parse the result and validate its host and port.
    3. Remove tracking query parameters (``utm_*``, ``fbclid``, ...).
    4. Re-serialise.  ASCII hosts are lowercased and an empty port is
       dropped; userinfo, path and fragment are left untouched.

    When every query pair is removed the ``?`` is dropped as well, so
    ``https://a.com/?utm_source=x`` becomes ``https://a.com/``.

    Args:
        raw: The URL as typed by the user, e.g. ``wttr.in``.
        tracking_keys: Override the exact-match denylist
            (defaults to ``settings.tracking_keys``).
        tracking_prefixes: Override the prefix denylist
            (defaults to ``settings.tracking_prefixes``).

    Raises:
        InvalidUrlError: If the string is not a well-formed URL.
    """
    url = _ensure_scheme(raw.strip())

    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise InvalidUrlError(url, str(exc)) from exc

    _check_host(parts, url)

    query = parts.query
    if query:
        query = strip_tracking_params(query, tracking_keys, tracking_prefixes)

    clean = urlunsplit(
        (
            parts.scheme,
            _normalize_netloc(parts.netloc),
            parts.path or "/",
            query,
            parts.fragment,
        )
    )
    if clean != url:
        logger.debug("Sanitized %s -> %s", url, clean)
    return clean
