"""Data models for the fetch pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class GateDecision:
    """Outcome of the transport check for a sanitized URL."""

    url: str
    scheme: str
    insecure: bool


@dataclass
class FetchResult:
    """The decoded HTTP response for a single URL fetch."""

    url: str
    final_url: str
    status_code: int
    text: str
    headers: List[Tuple[str, str]] = field(default_factory=list)
