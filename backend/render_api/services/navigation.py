"""
Single navigation attempt.

One attempt navigates with a given wait strategy, waits for the requested
selector, gives the network a bounded chance to go quiet, pauses for any
extra settle time and captures the document. Retrying is left to the
orchestrator.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from playwright.async_api import Page

from ..core.errors import NavigationError, QuiescenceTimeoutError, SelectorTimeoutError
from .best_effort import BestEffortResult, best_effort
from .render_request import RenderRequest
from .strategies import WaitStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttemptSuccess:
    html: str
    strategy: WaitStrategy
    attempt: int
    quiescence: Optional[BestEffortResult] = None


@dataclass(frozen=True)
class AttemptFailure:
    error: NavigationError
    strategy: WaitStrategy
    attempt: int

    @property
    def cause(self) -> str:
        return self.error.cause


AttemptOutcome = Union[AttemptSuccess, AttemptFailure]


class NavigationAttemptRunner:
    """Runs exactly one navigate-wait-capture pass against a page."""

    async def run(
        self,
        page: Page,
        request: RenderRequest,
        strategy: WaitStrategy,
        attempt: int,
    ) -> AttemptOutcome:
        try:
            await page.goto(request.url, wait_until=strategy.value, timeout=request.nav_timeout_ms)
        except Exception as e:
            return AttemptFailure(NavigationError(str(e), strategy.label, attempt), strategy, attempt)

        if request.selector:
            try:
                await page.wait_for_selector(request.selector, timeout=request.selector_timeout_ms)
            except Exception as e:
                error = SelectorTimeoutError(str(e), strategy.label, attempt, request.selector)
                return AttemptFailure(error, strategy, attempt)

        quiescence = await self.wait_for_quiescence(page, request)

        try:
            if request.extra_wait_ms > 0:
                await page.wait_for_timeout(request.extra_wait_ms)
            html = await page.content()
        except Exception as e:
            return AttemptFailure(NavigationError(str(e), strategy.label, attempt), strategy, attempt)

        return AttemptSuccess(html=html, strategy=strategy, attempt=attempt, quiescence=quiescence)

    async def wait_for_quiescence(self, page: Page, request: RenderRequest) -> BestEffortResult:
        async def settle():
            try:
                await page.wait_for_load_state(
                    WaitStrategy.NETWORK_QUIET.value,
                    timeout=request.quiescence_timeout_ms,
                )
            except Exception as e:
                raise QuiescenceTimeoutError(str(e)) from e

        return await best_effort("network-quiet settle", settle, logger)
