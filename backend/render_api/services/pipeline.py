import logging
from typing import Callable, Optional

from ..core.config import Settings
from ..core.errors import BrowserEnvironmentError
from .orchestrator import RetryOrchestrator
from .render_request import RenderRequest
from .resource_filter import install_resource_filter
from .results import Fatal, RenderResult
from .session import RenderSession

logger = logging.getLogger(__name__)


class RenderPipeline:
    """
    Full render of one request.

    Opens a fresh RenderSession, installs the fast-mode resource filter and
    hands the page to the RetryOrchestrator. Anything that goes wrong outside
    the orchestrator's attempt loop is reported as Fatal and not retried.
    The session is released on every path.
    """

    def __init__(
        self,
        settings: Settings,
        session_factory: Callable[[Settings], RenderSession] = RenderSession,
        orchestrator: Optional[RetryOrchestrator] = None,
    ):
        self.settings = settings
        self._session_factory = session_factory
        self.orchestrator = orchestrator or RetryOrchestrator(retry_pause_ms=settings.retry_pause_ms)

    async def run(self, request: RenderRequest) -> RenderResult:
        logger.info(
            f"Rendering {request.url}",
            extra={"url": request.url, "mode": request.mode.value, "nav_timeout_ms": request.nav_timeout_ms},
        )
        try:
            async with self._session_factory(self.settings) as session:
                await install_resource_filter(session.page, request.mode)
                return await self.orchestrator.drive(session.page, request)
        except BrowserEnvironmentError as e:
            logger.error(f"RENDER FATAL: {e}", exc_info=True)
            return Fatal(detail=e.message, error=e)
        except Exception as e:
            logger.error(f"RENDER FATAL: {e}", exc_info=True)
            return Fatal(detail=str(e))
