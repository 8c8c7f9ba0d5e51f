import logging

from playwright.async_api import Page, Route

from .render_request import RenderMode

logger = logging.getLogger(__name__)

BLOCKED_RESOURCE_TYPES = frozenset({"image", "media", "font"})


def should_abort(resource_type: str) -> bool:
    """Heavy assets are skipped in fast mode; everything else loads."""
    return resource_type in BLOCKED_RESOURCE_TYPES


async def handle_route(route: Route) -> None:
    if should_abort(route.request.resource_type):
        await route.abort()
    else:
        await route.continue_()


async def install_resource_filter(page: Page, mode: RenderMode) -> bool:
    """Route every request through the filter when ``mode`` is fast.

    Returns whether a filter was installed.
    """
    if mode is not RenderMode.FAST:
        return False
    await page.route("**/*", handle_route)
    logger.debug("Fast mode: blocking %s requests", ", ".join(sorted(BLOCKED_RESOURCE_TYPES)))
    return True
