"""
Page rendering module.
Turns a template URL carrying field values into a PDF with headless Chromium.
"""

import asyncio
import logging
import time
from typing import Dict, Optional
from urllib.parse import urlencode

from playwright.async_api import async_playwright, Error as PlaywrightError

from .results import RenderError

logger = logging.getLogger(__name__)


LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--no-zygote",
    "--single-process",
]


def build_page_url(base: str, filename: str, params: Optional[Dict[str, Optional[str]]] = None) -> str:
    """
    Template URL with field values as query parameters.

    Args:
        base: Internal base URL (e.g. http://127.0.0.1:3000)
        filename: Template file name under /templates
        params: Field values; None values are skipped

    Returns:
        Full URL, without '?' when there are no parameters
    """
    url = f"{base.rstrip('/')}/templates/{filename}"
    query = urlencode([(k, str(v)) for k, v in (params or {}).items() if v is not None])
    return f"{url}?{query}" if query else url


class PageRenderer:
    """Renders a URL to PDF bytes, one browser per call."""

    def __init__(self, timeout_seconds: float = 120.0, executable_path: Optional[str] = None):
        self.timeout_seconds = timeout_seconds
        self.executable_path = executable_path

    async def _render(self, url: str) -> bytes:
        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=True,
                executable_path=self.executable_path,
                args=LAUNCH_ARGS,
            )
            try:
                page = await browser.new_page()
                await page.emulate_media(media="screen")
                await page.goto(url, wait_until="networkidle", timeout=self.timeout_seconds * 1000)
                return await page.pdf(
                    format="Letter",
                    print_background=True,
                    margin={"top": "0in", "right": "0in", "bottom": "0in", "left": "0in"},
                )
            finally:
                await browser.close()

    async def render(self, url: str) -> bytes:
        """
        Render a page to PDF within the configured deadline.

        Raises:
            RenderError: on navigation failure, browser crash or timeout
        """
        started = time.monotonic()
        try:
            pdf = await asyncio.wait_for(self._render(url), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise RenderError(f"Render timed out after {self.timeout_seconds:.0f}s: {url}") from exc
        except (PlaywrightError, OSError) as exc:
            raise RenderError(f"Render failed for {url}: {exc}") from exc

        logger.debug("Rendered %s in %.2fs", url, time.monotonic() - started)
        return pdf
