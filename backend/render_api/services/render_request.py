"""
Render request validation.

Turns raw query parameters into an immutable RenderRequest. Runs before any
browser resource is acquired, so a rejected request never launches Chromium.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from ..core.errors import InvalidRequestError

URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")

WAIT_DEFAULT_MS = 0
WAIT_MIN_MS = 0
WAIT_MAX_MS = 15000

TIMEOUT_DEFAULT_MS = 45000
TIMEOUT_MIN_MS = 10000
TIMEOUT_MAX_MS = 90000


class RenderMode(str, Enum):
    FAST = "fast"
    FULL = "full"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "RenderMode":
        if raw is not None and raw.lower() == cls.FULL.value:
            return cls.FULL
        return cls.FAST


@dataclass(frozen=True)
class RenderRequest:
    """A validated render job."""
    url: str
    extra_wait_ms: int = WAIT_DEFAULT_MS
    selector: Optional[str] = None
    mode: RenderMode = RenderMode.FAST
    nav_timeout_ms: int = TIMEOUT_DEFAULT_MS

    @property
    def selector_timeout_ms(self) -> int:
        return min(20000, self.nav_timeout_ms)

    @property
    def quiescence_timeout_ms(self) -> int:
        return min(15000, self.nav_timeout_ms)


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


def parse_int(raw: Optional[str], default: int) -> int:
    """Parse the leading integer of ``raw``; anything unparseable yields ``default``."""
    if raw is None:
        return default
    match = _LEADING_INT.match(raw)
    if not match:
        return default
    return int(match.group(1))


def parse_render_request(params: Mapping[str, str]) -> RenderRequest:
    """Build a RenderRequest from query parameters or raise InvalidRequestError."""
    url = params.get("url") or ""
    if not URL_PATTERN.match(url):
        raise InvalidRequestError(details={"url": url})

    extra_wait_ms = clamp(parse_int(params.get("wait"), WAIT_DEFAULT_MS), WAIT_MIN_MS, WAIT_MAX_MS)
    nav_timeout_ms = clamp(parse_int(params.get("timeout"), TIMEOUT_DEFAULT_MS), TIMEOUT_MIN_MS, TIMEOUT_MAX_MS)

    return RenderRequest(
        url=url,
        extra_wait_ms=extra_wait_ms,
        selector=params.get("selector") or None,
        mode=RenderMode.parse(params.get("mode")),
        nav_timeout_ms=nav_timeout_ms,
    )
