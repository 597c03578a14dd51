# chat_image_parser/pipeline/steps.py
import logging
from pathlib import Path
from typing import Sequence

from .. import config
from ..delegates import ChromeDelegate, FileManagerDelegate, get_adapter
from ..models import BatchReport, RunState, RunTracker
from .aggregate import merge_json_to_excel
from .analysis import SessionBatcher

logger = logging.getLogger(__name__)


async def step_1_analyze_images(chrome: ChromeDelegate, site: str, file_manager: FileManagerDelegate,
                                images: Sequence[Path], tracker: RunTracker,
                                max_retries: int = config.MAX_RETRIES) -> BatchReport:
    """Step 1: sends every image through the chat site and saves one JSON file per image."""
    logger.info("--- STEP 1: ANALYSING %d IMAGES ON %s ---", len(images), site)
    adapter = get_adapter(site, file_manager)
    page = await chrome.connect()
    tracker.enter(RunState.CONNECTED)

    batcher = SessionBatcher(page, adapter, max_retries=max_retries, tracker=tracker)
    report = await batcher.run(images)

    logger.info(
        "Analysed %d of %d images over %d page loads.",
        len(report.analysed), report.total, report.page_loads,
    )
    for skipped in report.skipped:
        logger.warning("Not analysed: %s", skipped)
    logger.info("--- STEP 1 COMPLETE ---")
    return report


def step_2_merge_results(file_manager: FileManagerDelegate) -> Path:
    """Step 2: merges whatever result files exist into the spreadsheet."""
    logger.info("--- STEP 2: MERGING RESULTS ---")
    output_path = merge_json_to_excel(file_manager.folder)
    logger.info("--- STEP 2 COMPLETE ---")
    return output_path
