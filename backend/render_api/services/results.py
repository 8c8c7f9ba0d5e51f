from dataclasses import dataclass
from typing import Optional, Union

from ..core.errors import RenderApiError, RetryExhaustedError


@dataclass(frozen=True)
class Rendered:
    html: str


@dataclass(frozen=True)
class TimedOut:
    detail: str
    error: Optional[RetryExhaustedError] = None


@dataclass(frozen=True)
class Fatal:
    detail: str
    error: Optional[RenderApiError] = None


RenderResult = Union[Rendered, TimedOut, Fatal]
