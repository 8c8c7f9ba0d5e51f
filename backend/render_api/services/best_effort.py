import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional


@dataclass(frozen=True)
class BestEffortResult:
    """Outcome of an operation whose failure must not change the render outcome."""
    operation: str
    ok: bool
    error: Optional[str] = None


async def best_effort(
    operation: str,
    action: Callable[[], Awaitable[object]],
    logger: logging.Logger,
    level: int = logging.DEBUG,
) -> BestEffortResult:
    """Run ``action`` and report, rather than raise, any failure."""
    try:
        await action()
    except Exception as e:
        logger.log(level, f"{operation} failed: {e}")
        return BestEffortResult(operation=operation, ok=False, error=str(e))
    return BestEffortResult(operation=operation, ok=True)
