"""Centralised settings for purl.

All of the fetch policy lives here in one place.  Unlike most tools these
values are deliberately *not* read from environment variables or a
``.env`` file: every invocation behaves the same for a given set of
arguments.  Tests override individual fields with ``monkeypatch``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Tuple


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # HTTP client policy
    # ------------------------------------------------------------------
    request_timeout: float = 10.0
    max_redirects: int = 5
    # Pretend to be curl so servers like wttr.in answer with plain text
    user_agent: str = "curl/8.0"
    default_headers: Dict[str, str] = field(
        default_factory=lambda: {
            "Accept": "text/plain",
            "Connection": "close",
        }
    )
    binary_header_placeholder: str = "<binary>"

    # ------------------------------------------------------------------
    # URL sanitizer
    # ------------------------------------------------------------------
    default_scheme: str = "https"
    tracking_keys: FrozenSet[str] = field(
        default_factory=lambda: frozenset(
            {
                "fbclid",
                "gclid",
                "mc_cid",
                "mc_eid",
                "ref",
                "trk",
                "aff",
                "igshid",
                "scid",
            }
        )
    )
    tracking_prefixes: Tuple[str, ...] = ("utm_",)


# Module-level singleton: import this everywhere:
#   from purl.config import settings
settings = Settings()
