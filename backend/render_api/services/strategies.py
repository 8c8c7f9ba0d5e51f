from enum import Enum
from typing import Tuple


class WaitStrategy(str, Enum):
    """Navigation-completion conditions, valued by Playwright's ``wait_until`` names."""
    DOM_READY = "domcontentloaded"
    NETWORK_QUIET = "networkidle"

    @property
    def label(self) -> str:
        return "dom-ready" if self is WaitStrategy.DOM_READY else "network-quiet"


# Tried in this order on every round
WAIT_STRATEGY_SEQUENCE: Tuple[WaitStrategy, ...] = (
    WaitStrategy.DOM_READY,
    WaitStrategy.NETWORK_QUIET,
)
