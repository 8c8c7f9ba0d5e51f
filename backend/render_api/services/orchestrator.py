"""
Retry orchestration for page renders.

The orchestrator is an explicit state machine:

    ROUND1 -> ROUND2 -> EXHAUSTED
       \\         \\
        +---------+--> SUCCEEDED

Every round sweeps WAIT_STRATEGY_SEQUENCE in order. The first successful
attempt ends the render. A failed strategy is followed by a short pause
before the next strategy in the same round; a fully failed round is
followed by one best-effort soft reload. After the last round the render
is reported as timed out with the last recorded failure.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Sequence

from playwright.async_api import Page

from ..core.errors import RetryExhaustedError
from .best_effort import BestEffortResult, best_effort
from .navigation import AttemptFailure, AttemptSuccess, NavigationAttemptRunner
from .render_request import RenderRequest
from .results import Rendered, RenderResult, TimedOut
from .strategies import WAIT_STRATEGY_SEQUENCE, WaitStrategy

logger = logging.getLogger(__name__)

MAX_ROUNDS = 2
DEFAULT_RETRY_PAUSE_MS = 600


class RetryState(str, Enum):
    ROUND1 = "round1"
    ROUND2 = "round2"
    EXHAUSTED = "exhausted"
    SUCCEEDED = "succeeded"

    @property
    def is_terminal(self) -> bool:
        return self in (RetryState.EXHAUSTED, RetryState.SUCCEEDED)


_ROUND_STATES = (RetryState.ROUND1, RetryState.ROUND2)


@dataclass
class RetryProgress:
    """Mutable bookkeeping for one render's retry loop."""
    state: RetryState = RetryState.ROUND1
    strategy_index: int = 0
    attempts: int = 0
    last_failure: Optional[AttemptFailure] = None
    html: Optional[str] = None
    failures: List[AttemptFailure] = field(default_factory=list)
    reloads: List[BestEffortResult] = field(default_factory=list)

    @property
    def round(self) -> int:
        return _ROUND_STATES.index(self.state) + 1


class RetryOrchestrator:
    def __init__(
        self,
        runner: Optional[NavigationAttemptRunner] = None,
        strategies: Sequence[WaitStrategy] = WAIT_STRATEGY_SEQUENCE,
        retry_pause_ms: int = DEFAULT_RETRY_PAUSE_MS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.runner = runner or NavigationAttemptRunner()
        self.strategies = tuple(strategies)
        self.retry_pause_ms = retry_pause_ms
        self._sleep = sleep

    async def drive(self, page: Page, request: RenderRequest) -> RenderResult:
        progress = await self.run(page, request)
        if progress.state is RetryState.SUCCEEDED:
            return Rendered(html=progress.html)

        error = RetryExhaustedError(progress.last_failure.error if progress.last_failure else None)
        logger.error(f"RENDER ERROR final: {error.detail or 'Unknown'}", extra={"url": request.url})
        return TimedOut(detail=error.detail, error=error)

    async def run(self, page: Page, request: RenderRequest) -> RetryProgress:
        """Drive the state machine to a terminal state and return its progress."""
        progress = RetryProgress()
        while not progress.state.is_terminal:
            await self._step(page, request, progress)
        return progress

    async def _step(self, page: Page, request: RenderRequest, progress: RetryProgress):
        strategy = self.strategies[progress.strategy_index]
        round_number = progress.round
        progress.attempts += 1

        outcome = await self.runner.run(page, request, strategy, round_number)

        if isinstance(outcome, AttemptSuccess):
            progress.html = outcome.html
            progress.state = RetryState.SUCCEEDED
            logger.info(
                f"Rendered {request.url} with {strategy.label} on attempt {round_number}",
                extra={"url": request.url, "strategy": strategy.label, "attempt": round_number},
            )
            return

        progress.last_failure = outcome
        progress.failures.append(outcome)
        logger.warning(
            f"Nav attempt failed (attempt {round_number}, {strategy.value}): {outcome.cause}",
            extra={"url": request.url, "strategy": strategy.label, "attempt": round_number},
        )

        if progress.strategy_index + 1 < len(self.strategies):
            progress.strategy_index += 1
            await self._sleep(self.retry_pause_ms / 1000)
            return

        progress.reloads.append(await self.soft_reload(page, request))
        progress.strategy_index = 0
        progress.state = RetryState.ROUND2 if progress.state is RetryState.ROUND1 else RetryState.EXHAUSTED

    async def soft_reload(self, page: Page, request: RenderRequest) -> BestEffortResult:
        async def reload():
            await page.reload(wait_until=WaitStrategy.DOM_READY.value, timeout=request.nav_timeout_ms)

        return await best_effort("soft reload", reload, logger)
