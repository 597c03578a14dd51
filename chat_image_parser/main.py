# chat_image_parser/main.py
import logging
from pathlib import Path
from typing import Optional, Sequence

from . import config
from .delegates import ChromeDelegate, FileManagerDelegate, get_site_config
from .errors import ParserError
from .models import RunState, RunTracker
from .pipeline.steps import step_1_analyze_images, step_2_merge_results

logger = logging.getLogger(__name__)


def build_chrome() -> ChromeDelegate:
    return ChromeDelegate(
        chrome_path=config.CHROME_PATH,
        debug_port=config.DEBUG_PORT,
        profile_dir=config.PROFILE_DIR,
        connect_attempts=config.CONNECT_ATTEMPTS,
        connect_delay=config.CONNECT_DELAY,
        shutdown_timeout=config.SHUTDOWN_TIMEOUT,
    )


async def main(folder: Path, site: str = config.DEFAULT_SITE,
               steps_to_run: Sequence[int] = (1, 2),
               max_retries: int = config.MAX_RETRIES,
               tracker: Optional[RunTracker] = None) -> RunState:
    """
    Runs the whole job for one folder and returns the final state.

    Site, folder and images are all validated before Chrome is launched.
    Whatever happens afterwards, Chrome is terminated before returning.
    """
    tracker = tracker or RunTracker()
    chrome: Optional[ChromeDelegate] = None
    try:
        get_site_config(site)
        file_manager = FileManagerDelegate(folder)
        file_manager.ensure_folder()

        if 1 in steps_to_run:
            images = file_manager.list_images()
            if site == "ideaTALK":
                logger.info("Using ideaTALK: select the gemini-2.0-pro model in the page for best image recognition.")

            tracker.enter(RunState.STARTING)
            chrome = build_chrome()
            await chrome.start()
            await step_1_analyze_images(chrome, site, file_manager, images, tracker, max_retries)
        else:
            logger.info("Step 1 skipped as per --steps argument.")

        if 2 in steps_to_run:
            tracker.enter(RunState.AGGREGATING)
            step_2_merge_results(file_manager)
        else:
            logger.info("Step 2 skipped as per --steps argument.")
    except ParserError as e:
        logger.error("Run aborted: %s", e)
        failed = True
    except Exception as e:
        logger.critical("An unexpected error stopped the run: %s", e, exc_info=True)
        failed = True
    else:
        failed = False
    finally:
        tracker.enter(RunState.CLOSING)
        if chrome is not None:
            await chrome.stop()

    tracker.enter(RunState.FAILED if failed else RunState.DONE)
    logger.info("Run finished: %s", tracker.state.value)
    return tracker.state
