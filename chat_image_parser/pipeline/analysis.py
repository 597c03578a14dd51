# chat_image_parser/pipeline/analysis.py
import logging
from pathlib import Path
from typing import Optional, Sequence

from playwright.async_api import Page

from .. import config
from ..delegates import SiteAdapter
from ..errors import ConfigError, InteractionError
from ..models import BatchReport, RunState, RunTracker

logger = logging.getLogger(__name__)


async def retry_analyze_image(page: Page, adapter: SiteAdapter, image_path: Path,
                              max_retries: int = config.MAX_RETRIES,
                              backoff_ms: int = config.RETRY_BACKOFF) -> str:
    """
    Runs the site adapter on one image, retrying after a short pause.
    Re-raises the last error once ``max_retries`` attempts have failed.
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    result_name = image_path.stem
    for attempt in range(1, max_retries + 1):
        try:
            result = await adapter.analyze(page, image_path, result_name)
        except (InteractionError, OSError) as e:
            logger.error("Analysis of %s failed (attempt %d/%d): %s", image_path, attempt, max_retries, e)
            if attempt == max_retries:
                logger.error("Giving up on %s after %d attempts.", image_path, max_retries)
                raise
            await page.wait_for_timeout(backoff_ms)
        else:
            logger.info("Analysed %s (attempt %d).", image_path.name, attempt)
            return result


class SessionBatcher:
    """
    Spreads images over page loads of the chat site.

    A long chat accumulates history and gets sluggish, so after
    ``max_uploads_per_session`` images the page is loaded afresh.
    """
    def __init__(self, page: Page, adapter: SiteAdapter,
                 max_retries: int = config.MAX_RETRIES,
                 tracker: Optional[RunTracker] = None):
        self.page = page
        self.adapter = adapter
        self.max_retries = max_retries
        self.tracker = tracker or RunTracker()
        self.quota = adapter.config.max_uploads_per_session
        if self.quota < 1:
            raise ConfigError(f"Upload quota for {adapter.config.name} must be positive, got {self.quota}.")

    async def load_session(self):
        logger.info("Loading %s...", self.adapter.config.url)
        await self.page.goto(self.adapter.config.url)
        await self.page.wait_for_load_state("networkidle", timeout=config.PAGE_LOAD_TIMEOUT)
        logger.info("Page loaded.")

    async def run(self, images: Sequence[Path]) -> BatchReport:
        report = BatchReport()
        index = 0
        while index < len(images):
            self.tracker.enter(RunState.BATCHING)
            await self.load_session()
            report.page_loads += 1

            uploads_this_session = 0
            while uploads_this_session < self.quota and index < len(images):
                image_path = images[index]
                self.tracker.enter(RunState.ANALYZING)
                try:
                    await retry_analyze_image(self.page, self.adapter, image_path, self.max_retries)
                except (InteractionError, OSError):
                    logger.error("Skipping %s, moving on to the next image.", image_path)
                    report.skipped.append(image_path)
                else:
                    report.analysed.append(image_path)
                # Skipped images still used up an upload slot in this session.
                index += 1
                uploads_this_session += 1

            if index < len(images):
                logger.info("Session quota of %d uploads reached, reloading the page...", self.quota)
                await self.page.wait_for_timeout(config.RELOAD_PAUSE)
        return report
