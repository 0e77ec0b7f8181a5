"""
Browser Session
================
Thin layer over async Playwright: one Chromium instance with one page,
reused for the whole run.

Every call is awaited before the next one starts, so the shared page needs
no locking.  Navigation and rendering errors are not caught here.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from playwright.async_api import async_playwright, Browser, Page, Playwright

logger = logging.getLogger(__name__)

# Scrolls one step and reports (bottom edge of viewport, document height)
_SCROLL_STEP_JS = """
(step) => {
    window.scrollBy(0, step);
    return [window.scrollY + window.innerHeight, document.body.scrollHeight];
}
"""


@dataclass(frozen=True)
class LoadPolicy:
    """
    How long to wait after each navigation.

    With ``wait_for_render_ms`` set the page is given a fixed delay after
    ``load``; otherwise navigation waits for network idle with no timeout,
    so a page that never goes idle blocks the run.
    """
    wait_for_render_ms: Optional[int] = None

    @property
    def description(self) -> str:
        if self.wait_for_render_ms:
            return f"fixed delay {self.wait_for_render_ms}ms"
        return "network idle (no timeout)"

    async def navigate(self, page: Page, url: str) -> None:
        if self.wait_for_render_ms:
            await page.goto(url)
            logger.info("Rendering...")
            await page.wait_for_timeout(self.wait_for_render_ms)
        else:
            await page.goto(url, wait_until="networkidle", timeout=0)


def forward_console(page: Page) -> None:
    """Relay the page's console output to the log (diagnostics only)."""
    def _on_console(msg) -> None:
        logger.info(f"[CONSOLE] {msg.text}")

    page.on("console", _on_console)


async def scroll_to_bottom(
    page: Page,
    scroll_step: int = 800,
    pause_ms: int = 100,
    max_scrolls: int = 1000,
) -> int:
    """Scroll the whole document step by step to trigger lazy-loaded media.

    Returns:
        Document height when the bottom was reached.
    """
    height = 0
    for _ in range(max_scrolls):
        bottom, height = await page.evaluate(_SCROLL_STEP_JS, scroll_step)
        await asyncio.sleep(pause_ms / 1000)
        if bottom >= height:
            break
    else:
        logger.warning(f"[BROWSER] Stopped scrolling after {max_scrolls} steps")

    logger.debug(f"[BROWSER] Scrolled to bottom (height={height})")
    return height


class BrowserSession:
    """
    Async context manager yielding the single page used for a run.

    Usage::

        async with BrowserSession(["--no-sandbox"]) as page:
            await page.goto("https://docs.example.com")
    """

    def __init__(self, browser_args: Sequence[str] = (), headless: bool = True):
        self.browser_args: List[str] = list(browser_args)
        self.headless = headless
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self.page: Optional[Page] = None

    async def __aenter__(self) -> Page:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
            args=self.browser_args,
        )
        self.page = await self._browser.new_page()
        forward_console(self.page)
        logger.info(
            f"[BROWSER] Chromium launched (headless={self.headless}, "
            f"args={self.browser_args or 'none'})"
        )
        return self.page

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close browser and Playwright."""
        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.debug(f"[BROWSER] Close failed: {e}")
            self._browser = None
            self.page = None
        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.debug(f"[BROWSER] Playwright stop failed: {e}")
            self._playwright = None
