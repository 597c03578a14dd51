# chat_image_parser/delegates/chrome_delegate.py
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import httpx
from playwright.async_api import async_playwright, Browser, Error as PlaywrightError, Page, Playwright

from ..errors import BrowserUnavailable, NoBrowserContext

logger = logging.getLogger(__name__)


class ChromeDelegate:
    """
    Owns the local Chrome process and the Playwright connection to it.

    Chrome is started as a normal child process with a remote-debugging port so
    the chat sites see a regular, logged-in browser profile. Playwright then
    attaches over CDP instead of launching its own bundled browser.
    """
    def __init__(self, chrome_path: str, debug_port: int, profile_dir: Path,
                 connect_attempts: int = 5, connect_delay: float = 2.0,
                 shutdown_timeout: float = 10.0):
        self.chrome_path = chrome_path
        self.debug_port = debug_port
        self.profile_dir = Path(profile_dir)
        self.connect_attempts = connect_attempts
        self.connect_delay = connect_delay
        self.shutdown_timeout = shutdown_timeout
        self._process: Optional[asyncio.subprocess.Process] = None
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    @property
    def endpoint(self) -> str:
        return f"http://127.0.0.1:{self.debug_port}"

    def launch_args(self) -> List[str]:
        return [
            f"--remote-debugging-port={self.debug_port}",
            "--no-first-run",
            "--no-default-browser-check",
            f"--user-data-dir={self.profile_dir}",
            "--new-window",
        ]

    async def start(self):
        """Spawns Chrome and blocks until its debugging endpoint answers."""
        logger.info("Launching Chrome with remote debugging on port %d...", self.debug_port)
        try:
            self._process = await asyncio.create_subprocess_exec(self.chrome_path, *self.launch_args())
        except OSError as e:
            raise BrowserUnavailable(f"Could not launch Chrome at '{self.chrome_path}': {e}") from e

        logger.info("Chrome started (pid %s), waiting for the debugging port...", self._process.pid)
        async with httpx.AsyncClient(timeout=5.0) as client:
            for attempt in range(1, self.connect_attempts + 1):
                if self._process.returncode is not None:
                    raise BrowserUnavailable(f"Chrome exited early with code {self._process.returncode}.")
                if await self._debugger_ready(client):
                    logger.info("Chrome debugging port is ready.")
                    return
                logger.info("Debugging port not ready yet (attempt %d/%d)...", attempt, self.connect_attempts)
                await asyncio.sleep(self.connect_delay)

        raise BrowserUnavailable(
            f"Chrome debugging port {self.debug_port} not reachable after {self.connect_attempts} attempts."
        )

    async def _debugger_ready(self, client: httpx.AsyncClient) -> bool:
        try:
            response = await client.get(f"{self.endpoint}/json/version")
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug("Debugging endpoint probe failed: %s", e)
            return False
        return True

    async def connect(self) -> Page:
        """Attaches Playwright to the running Chrome and opens a fresh tab in its first context."""
        logger.info("Connecting to Chrome at %s...", self.endpoint)
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.connect_over_cdp(self.endpoint)
        except PlaywrightError as e:
            raise BrowserUnavailable(f"Could not attach to Chrome over CDP: {e}") from e

        if not self._browser.contexts:
            raise NoBrowserContext("Chrome exposes no browser context to attach to.")
        context = self._browser.contexts[0]

        # The copy buttons write to the clipboard; reading it back needs permission.
        try:
            await context.grant_permissions(["clipboard-read", "clipboard-write"])
        except PlaywrightError as e:
            logger.warning("Could not grant clipboard permissions, reads may be denied: %s", e)

        page = await context.new_page()
        logger.debug("Opened a new tab in the default browser context.")
        return page

    async def stop(self):
        """Disconnects Playwright and terminates Chrome. Safe to call more than once."""
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        # A failed disconnect must not keep the Chrome process alive.
        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                logger.warning("Error while disconnecting from Chrome: %s", e, exc_info=True)
        if playwright is not None:
            try:
                await playwright.stop()
            except Exception as e:
                logger.warning("Error while stopping Playwright: %s", e, exc_info=True)

        process, self._process = self._process, None
        if process is None or process.returncode is not None:
            return

        logger.info("Shutting down Chrome (pid %s)...", process.pid)
        try:
            process.terminate()
        except ProcessLookupError:
            return
        try:
            await asyncio.wait_for(process.wait(), timeout=self.shutdown_timeout)
        except asyncio.TimeoutError:
            logger.warning("Chrome ignored SIGTERM for %.0fs, killing it.", self.shutdown_timeout)
            process.kill()
            await process.wait()
        logger.info("Chrome stopped.")
