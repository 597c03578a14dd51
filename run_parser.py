# run_parser.py
import asyncio
import argparse
import logging
import sys
from pathlib import Path

# Import RichHandler here for centralized logging
from rich.logging import RichHandler

from chat_image_parser import config
from chat_image_parser.main import main as run_pipeline
from chat_image_parser.models import RunState


def configure_logging(log_file: Path, verbose: bool = False):
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(levelname)-8s - %(name)-40s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG) # Log all debug messages to file
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    rich_handler = RichHandler(
        level=logging.DEBUG if verbose else logging.INFO,
        show_time=True,
        show_level=True,
        show_path=False,
    )
    root_logger.addHandler(rich_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract store/product/price data from a folder of images via a web chat assistant.",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog="""Examples:
    python run_parser.py kimi ./photos
    python run_parser.py ideaTALK /data/receipts
    python run_parser.py ./photos --steps 2
"""
    )
    parser.add_argument(
        "site",
        nargs="?",
        default=config.DEFAULT_SITE,
        help=f"Chat site to use: {', '.join(config.SITES)} (default: {config.DEFAULT_SITE})."
    )
    parser.add_argument("folder", nargs="?", help="Folder containing the images (required).")
    parser.add_argument(
        "--steps",
        nargs="+",
        type=int,
        choices=[1, 2],
        default=[1, 2],
        help="""Specify which pipeline steps to run.
    1: Analyse images on the chat site (one JSON file per image)
    2: Merge the JSON files into merged_data.xlsx
Example: python run_parser.py ./photos --steps 2
"""
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=config.MAX_RETRIES,
        help=f"Attempts per image before it is skipped (default: {config.MAX_RETRIES})."
    )
    parser.add_argument("--log-file", type=Path, default=Path("parser.log"), help="Debug log file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output on the console.")
    return parser


def parse_args(argv=None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)

    # A lone positional that is not a site name is the folder: `run_parser.py ./photos`.
    if args.folder is None and args.site not in config.SITES:
        args.folder, args.site = args.site, config.DEFAULT_SITE
    if args.folder is None:
        parser.error("a folder path is required, e.g. run_parser.py kimi /path/to/folder")
    if args.max_retries < 1:
        parser.error("--max-retries must be at least 1")

    args.folder = Path(args.folder).expanduser().resolve()
    return args


def cli(argv=None):
    args = parse_args(argv)
    configure_logging(args.log_file, args.verbose)

    logging.info("=" * 60)
    logging.info("Image parser starting: site=%s folder=%s", args.site, args.folder)
    logging.info("Running steps: %s", args.steps)
    logging.info("=" * 60)

    state = RunState.FAILED
    try:
        state = asyncio.run(run_pipeline(args.folder, args.site, args.steps, args.max_retries))
    except KeyboardInterrupt:
        logging.warning("Run interrupted by user.")
    finally:
        logging.info("=" * 60)
        logging.info("Run finished.")

    sys.exit(0 if state is RunState.DONE else 1)


if __name__ == "__main__":
    cli()
