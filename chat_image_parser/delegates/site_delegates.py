# chat_image_parser/delegates/site_delegates.py
import logging
import re
from pathlib import Path
from typing import Dict, Optional, Type

from playwright.async_api import Error as PlaywrightError, Page, TimeoutError as PlaywrightTimeoutError

from .. import config
from ..errors import AnalysisTimeout, ConfigError, InteractionError
from ..models import SiteConfig
from .clipboard_delegate import ClipboardDelegate
from .file_manager_delegate import FileManagerDelegate

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Removes markdown code-fence markers the assistants wrap around JSON answers."""
    return _CODE_FENCE.sub("", text).strip()


def get_site_config(site: str) -> SiteConfig:
    try:
        return config.SITES[site]
    except KeyError:
        raise ConfigError(
            f"Unsupported site '{site}'. Choose one of: {', '.join(sorted(config.SITES))}"
        ) from None


class SiteAdapter:
    """
    Drives one chat site through upload -> prompt -> send -> wait -> copy.

    The shared sequence lives in :meth:`analyze`. Each site supplies its own
    upload gesture, submit gating and completion signal; those checks are not
    interchangeable between sites, so they stay per-subclass.
    """
    site_name: str = ""

    def __init__(self, site_config: SiteConfig, file_manager: FileManagerDelegate,
                 clipboard: Optional[ClipboardDelegate] = None):
        self.config = site_config
        self.selectors = site_config.selectors
        self.file_manager = file_manager
        self.clipboard = clipboard or ClipboardDelegate()

    async def analyze(self, page: Page, image_path: Path, result_name: str) -> str:
        """Sends one image to the site and returns (and saves) the cleaned answer."""
        try:
            logger.info("Uploading image: %s", image_path)
            await self.upload(page, image_path)
            logger.info("Upload finished: %s", image_path.name)

            logger.info("Entering prompt text...")
            await self.enter_prompt(page)

            baseline = await self.completion_baseline(page)
            await self.wait_until_submit_ready(page)
            await page.keyboard.press("Enter")
            logger.info("Message sent.")

            await self.wait_for_completion(page, baseline)
            logger.info("Analysis complete.")

            content = await self.copy_result(page)
        except PlaywrightTimeoutError as e:
            raise AnalysisTimeout(f"{self.site_name}: timed out on {image_path.name}: {e}") from e
        except PlaywrightError as e:
            raise InteractionError(f"{self.site_name}: page interaction failed on {image_path.name}: {e}") from e

        self.file_manager.save_result(image_path, result_name, content)
        return content

    async def upload(self, page: Page, image_path: Path):
        raise NotImplementedError

    async def enter_prompt(self, page: Page):
        await page.locator(self.selectors.chat_input_editor).fill(self.config.prompt)

    async def completion_baseline(self, page: Page) -> int:
        """State captured before sending that :meth:`wait_for_completion` compares against."""
        return 0

    async def wait_until_submit_ready(self, page: Page):
        raise NotImplementedError

    async def wait_for_completion(self, page: Page, baseline: int):
        raise NotImplementedError

    async def copy_result(self, page: Page) -> str:
        copy_button = page.locator(self.selectors.copy_result_button).last
        raw = await self.clipboard.copy_from(page, copy_button)
        logger.debug("Clipboard returned %d characters.", len(raw))
        return strip_code_fences(raw)


class KimiAdapter(SiteAdapter):
    """
    Kimi marks its send button with a ``disabled`` class until the upload is
    processed, and shows a stop button while the answer is streaming.
    """
    site_name = "kimi"

    async def upload(self, page: Page, image_path: Path):
        # The attachment control is a <label>; its default action opens the native file dialog.
        await page.evaluate(
            """(selector) => {
                const button = document.querySelector(selector);
                if (button) button.addEventListener("click", (e) => e.preventDefault());
            }""",
            self.selectors.attachment_button,
        )
        await page.locator(self.selectors.attachment_button).click()
        await page.set_input_files(self.selectors.file_input, str(image_path))

    async def enter_prompt(self, page: Page):
        editor = page.locator(self.selectors.chat_input_editor)
        await editor.click()
        await editor.fill(self.config.prompt)

    async def wait_until_submit_ready(self, page: Page):
        logger.info("Waiting for the send button to become enabled...")
        max_polls = max(1, config.ANALYSIS_TIMEOUT // config.SEND_POLL_INTERVAL)
        for _ in range(max_polls):
            class_attr = await page.locator(self.selectors.send_button).get_attribute("class") or ""
            if "disabled" not in class_attr:
                logger.info("Send button is enabled.")
                break
            await page.wait_for_timeout(config.SEND_POLL_INTERVAL)
        else:
            raise AnalysisTimeout(f"Send button stayed disabled for {config.ANALYSIS_TIMEOUT} ms.")
        await page.wait_for_timeout(config.SETTLE_DELAY)

    async def wait_for_completion(self, page: Page, baseline: int):
        # "detached" is satisfied at once if the stop button has not shown up yet.
        try:
            await page.wait_for_selector(
                self.selectors.analyzed_mark, state="attached", timeout=config.BUSY_APPEAR_TIMEOUT
            )
        except PlaywrightTimeoutError:
            logger.debug("Stop button never appeared; the answer may already be complete.")
        await page.wait_for_selector(
            self.selectors.analyzed_mark, state="detached", timeout=config.ANALYSIS_TIMEOUT
        )


class IdeaTalkAdapter(SiteAdapter):
    """
    ideaTALK gives no readiness signal on its send button, so submission waits a
    fixed settle delay. A finished answer gets a "once more" button.
    """
    site_name = "ideaTALK"

    async def upload(self, page: Page, image_path: Path):
        await page.locator(self.selectors.attachment_button).first.click()
        await page.set_input_files(self.selectors.file_input, str(image_path))

    async def completion_baseline(self, page: Page) -> int:
        # Earlier answers in the same session already carry the marker.
        return await page.locator(self.selectors.analyzed_mark).count()

    async def wait_until_submit_ready(self, page: Page):
        await page.wait_for_timeout(config.SETTLE_DELAY)

    async def wait_for_completion(self, page: Page, baseline: int):
        await page.locator(self.selectors.analyzed_mark).nth(baseline).wait_for(
            state="attached", timeout=config.ANALYSIS_TIMEOUT
        )


ADAPTERS: Dict[str, Type[SiteAdapter]] = {
    KimiAdapter.site_name: KimiAdapter,
    IdeaTalkAdapter.site_name: IdeaTalkAdapter,
}


def get_adapter(site: str, file_manager: FileManagerDelegate,
                clipboard: Optional[ClipboardDelegate] = None) -> SiteAdapter:
    """Builds the adapter for ``site``; unknown names raise :class:`ConfigError`."""
    site_config = get_site_config(site)
    adapter_cls = ADAPTERS.get(site)
    if adapter_cls is None:
        raise ConfigError(f"No interaction sequence defined for site '{site}'.")
    return adapter_cls(site_config, file_manager, clipboard)
