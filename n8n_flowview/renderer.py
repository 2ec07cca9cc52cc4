"""Playwright renderer module for capturing diagram snapshots."""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Error as PlaywrightError

from n8n_flowview.exceptions import RenderError

logger = logging.getLogger(__name__)

CANVAS_SELECTOR = "#flow"
READY_SELECTOR = "body[data-ready='true']"
NODE_SELECTOR = ".react-flow__node"


class WorkflowRenderer:
    """Renderer for capturing the served diagram using Playwright."""

    def __init__(
        self,
        server_url: str = "http://127.0.0.1:5000",
        width: int = 1920,
        height: int = 1080,
        device_scale_factor: int = 2,
        timeout: int = 30000,
        headless: bool = True,
        max_retries: int = 3,
        retry_delay: float = 2.0,
    ):
        """Initialize the workflow renderer.

        Args:
            server_url: URL of the Flask server
            width: Viewport width in pixels
            height: Viewport height in pixels
            device_scale_factor: Device scale factor for retina quality (default: 2)
            timeout: Maximum timeout for page operations in milliseconds
            headless: Run browser in headless mode
            max_retries: Maximum number of retry attempts for failed renders
            retry_delay: Seconds to wait between attempts
        """
        self.server_url = server_url
        self.width = width
        self.height = height
        self.device_scale_factor = device_scale_factor
        self.timeout = timeout
        self.headless = headless
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._playwright = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self) -> None:
        """Start the Playwright browser instance."""
        logger.info("Starting Playwright browser")

        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.headless)

            self._context = await self._browser.new_context(
                viewport={"width": self.width, "height": self.height},
                device_scale_factor=self.device_scale_factor,
            )
            self._context.set_default_timeout(self.timeout)

            logger.info(
                f"Browser started - Viewport: {self.width}x{self.height}, "
                f"Scale: {self.device_scale_factor}x"
            )

        except Exception as e:
            logger.error(f"Failed to start browser: {e}")
            raise RenderError(f"Browser startup failed: {e}") from e

    async def close(self) -> None:
        """Close the Playwright browser instance."""
        logger.info("Closing Playwright browser")

        try:
            if self._context:
                await self._context.close()
                self._context = None

            if self._browser:
                await self._browser.close()
                self._browser = None

            if self._playwright:
                await self._playwright.stop()
                self._playwright = None

        except Exception as e:
            logger.error(f"Error closing browser: {e}")

    async def render_snapshot(self, output_path: Path, settle_time: int = 1000) -> bool:
        """Capture the diagram currently held by the server.

        Args:
            output_path: Path to save the PNG screenshot
            settle_time: Time to let the layout settle in milliseconds

        Returns:
            True if rendering was successful

        Raises:
            RenderError: If rendering fails after all retries
        """
        if not self._browser or not self._context:
            raise RenderError("Browser not started. Call start() first.")

        for attempt in range(1, self.max_retries + 1):
            try:
                logger.info(f"Capturing diagram (Attempt {attempt}/{self.max_retries})")
                await self._render_attempt(output_path, settle_time)
                logger.info(f"Snapshot saved: {output_path}")
                return True

            except (PlaywrightError, RenderError) as e:
                logger.warning(f"Render attempt {attempt} failed: {e}")

                if attempt == self.max_retries:
                    logger.error("All retry attempts failed")
                    raise RenderError(
                        f"Failed to capture diagram after {self.max_retries} attempts"
                    ) from e

                await asyncio.sleep(self.retry_delay)

        return False

    async def _render_attempt(self, output_path: Path, settle_time: int) -> None:
        """Single render attempt.

        Args:
            output_path: Path to save the PNG screenshot
            settle_time: Time to let the layout settle in milliseconds
        """
        page: Optional[Page] = None

        try:
            page = await self._context.new_page()

            logger.debug(f"Navigating to: {self.server_url}/")
            await page.goto(f"{self.server_url}/", wait_until="networkidle", timeout=self.timeout)

            await page.wait_for_selector(READY_SELECTOR, state="attached")
            if await page.locator(NODE_SELECTOR).count() == 0:
                raise RenderError("Diagram has no nodes to capture")

            start_time = time.time()
            await page.wait_for_timeout(settle_time)
            logger.debug(f"Waited {time.time() - start_time:.1f}s for layout")

            canvas = await page.query_selector(CANVAS_SELECTOR)
            if canvas is None:
                raise RenderError("Could not find diagram canvas")

            output_path.parent.mkdir(parents=True, exist_ok=True)
            await canvas.screenshot(path=str(output_path), type="png", animations="disabled")

            file_size = output_path.stat().st_size / 1024  # KB
            logger.debug(f"Screenshot saved: {output_path.name} ({file_size:.1f} KB)")

        finally:
            if page:
                await page.close()


@asynccontextmanager
async def create_renderer(**kwargs):
    """Async context manager to create and manage a renderer.

    Args:
        **kwargs: Arguments to pass to WorkflowRenderer

    Yields:
        WorkflowRenderer instance
    """
    renderer = WorkflowRenderer(**kwargs)
    try:
        await renderer.start()
        yield renderer
    finally:
        await renderer.close()
