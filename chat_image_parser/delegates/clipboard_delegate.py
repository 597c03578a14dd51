# chat_image_parser/delegates/clipboard_delegate.py
import asyncio
import logging

from playwright.async_api import Locator, Page

logger = logging.getLogger(__name__)


class ClipboardDelegate:
    """
    The only reader of the system clipboard.

    The chat sites hand results over by writing them to the clipboard, which is
    global to the whole desktop session. Clicking a copy button and reading the
    clipboard back must happen as one step with nothing else copying in between,
    so both run under a single lock. Do not read the clipboard anywhere else.
    """
    def __init__(self):
        self._lock = asyncio.Lock()

    async def copy_from(self, page: Page, copy_button: Locator) -> str:
        """Clicks ``copy_button`` and returns what it put on the clipboard."""
        async with self._lock:
            await page.bring_to_front()
            await copy_button.click()
            logger.debug("Copy button clicked, reading clipboard...")
            text = await page.evaluate("() => navigator.clipboard.readText()")
        return text or ""
