"""Headless-browser rendering of result pages into read-only documents."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from app.core.config import Settings, get_settings
from app.services.extraction.base import PageRequest, PageUnavailableError
from app.services.extraction.document import DocumentHandle, SoupDocument

LOGGER = logging.getLogger(__name__)

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
]


class PageRenderer(Protocol):
    async def render(self, request: PageRequest) -> DocumentHandle:
        ...


class PlaywrightRenderer:
    """Render a page in Chromium and hand back a snapshot of its DOM.

    Every navigation and wait carries a timeout. When the result markup does
    not show up in time the current page state is returned anyway so the
    adapters can extract whatever is there.
    """

    def __init__(self, settings: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> None:
        self.settings = settings or get_settings()
        self.logger = logger or LOGGER

    async def render(self, request: PageRequest) -> DocumentHandle:
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(
                headless=self.settings.browser_headless, args=BROWSER_ARGS
            )
            try:
                page = await browser.new_page(user_agent=self.settings.user_agent)
                page.set_default_timeout(self.settings.browser_wait_timeout_ms)

                self.logger.info("Navigating to %s", request.url)
                try:
                    response = await page.goto(
                        request.url,
                        wait_until=request.wait_until,
                        timeout=self.settings.browser_navigation_timeout_ms,
                    )
                except PlaywrightError as exc:
                    raise PageUnavailableError(f"Failed to load {request.url}: {exc}") from exc
                if response is not None and not response.ok:
                    raise PageUnavailableError(
                        f"Failed to load {request.url}. Status: {response.status}"
                    )

                if request.prepare is not None:
                    try:
                        await request.prepare(page)
                    except PlaywrightError as exc:
                        raise PageUnavailableError(f"Could not submit query: {exc}") from exc

                try:
                    await page.wait_for_selector(request.ready_selector)
                    await page.wait_for_load_state("domcontentloaded")
                except PlaywrightTimeoutError:
                    self.logger.warning(
                        "Timed out waiting for %r on %s; extracting best-effort",
                        request.ready_selector,
                        page.url,
                    )

                html = await page.content()
                return SoupDocument.from_html(html, url=page.url)
            finally:
                await browser.close()
