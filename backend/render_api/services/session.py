"""
Per-request browser session.

Each render owns a private Playwright driver, Chromium process, browser
context and page. Nothing here is pooled: the session is entered once,
used by a single request and released exactly once, whatever happened
in between.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, ConsoleMessage, Page, Playwright

from ..core.config import Settings
from ..core.errors import BrowserEnvironmentError, CleanupError
from .best_effort import BestEffortResult, best_effort

logger = logging.getLogger(__name__)

PAGE_LOGGER = logging.getLogger("render_api.page")


class RenderSession:
    """Async context manager owning one browser, one context and one page."""

    def __init__(self, settings: Settings, playwright_factory: Callable = async_playwright):
        self.settings = settings
        self._playwright_factory = playwright_factory
        self._playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self._released = False
        self.cleanup_results: List[BestEffortResult] = []

    async def __aenter__(self) -> "RenderSession":
        try:
            await self._acquire()
        except asyncio.CancelledError:
            logger.warning("Browser session cancelled during startup")
            await self.release()
            raise
        except Exception as e:
            logger.error(f"Browser session could not be created: {e}")
            await self.release()
            raise BrowserEnvironmentError(str(e)) from e
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.release()

    async def _acquire(self):
        self._playwright = await self._playwright_factory().start()
        self.browser = await self._playwright.chromium.launch(
            headless=self.settings.browser_headless,
            args=list(self.settings.browser_args),
        )
        self.context = await self.browser.new_context(
            user_agent=self.settings.user_agent,
            locale=self.settings.locale,
            timezone_id=self.settings.timezone_id,
            java_script_enabled=True,
            viewport=self.settings.viewport,
            ignore_https_errors=True,
        )
        self.page = await self.context.new_page()
        if self.settings.page_console_logging:
            self._attach_page_logging(self.page)
        logger.debug("Browser session ready")

    def _attach_page_logging(self, page: Page):
        def on_console(message: ConsoleMessage):
            if message.type in ("error", "warning"):
                PAGE_LOGGER.info(f"[page:{message.type}] {message.text}")

        def on_page_error(error):
            PAGE_LOGGER.info(f"[pageerror] {error}")

        page.on("console", on_console)
        page.on("pageerror", on_page_error)

    @property
    def released(self) -> bool:
        return self._released

    async def release(self) -> List[BestEffortResult]:
        """Close the browser and stop the driver. Safe to call more than once."""
        if self._released:
            return self.cleanup_results
        self._released = True

        try:
            if self.browser is not None:
                self.cleanup_results.append(
                    await best_effort("browser close", self._close_browser, logger, logging.WARNING)
                )
        finally:
            # The driver is stopped even when the browser close is cancelled
            try:
                if self._playwright is not None:
                    self.cleanup_results.append(
                        await best_effort("playwright stop", self._stop_playwright, logger, logging.WARNING)
                    )
            finally:
                self.page = None
                self.context = None
                self.browser = None
                self._playwright = None
        return self.cleanup_results

    async def _close_browser(self):
        try:
            await self.browser.close()
        except Exception as e:
            raise CleanupError(str(e)) from e

    async def _stop_playwright(self):
        try:
            await self._playwright.stop()
        except Exception as e:
            raise CleanupError(str(e)) from e
