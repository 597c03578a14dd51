# chat_image_parser/pipeline/aggregate.py
import logging
from pathlib import Path
from typing import List, Optional

from ..delegates import FileManagerDelegate, SpreadsheetDelegate
from ..errors import ParseError
from ..models import AggregateRow

logger = logging.getLogger(__name__)


def collect_rows(file_manager: FileManagerDelegate) -> List[AggregateRow]:
    """
    Reads every result file in the folder and flattens the arrays into rows.
    Files that fail to parse are skipped; non-array documents add nothing.
    """
    rows: List[AggregateRow] = []
    for file_path in file_manager.list_result_files():
        try:
            data = file_manager.load_result(file_path)
        except ParseError as e:
            logger.error("Skipping %s: %s", file_path, e)
            continue
        if isinstance(data, list):
            rows.extend(AggregateRow.from_item(item) for item in data)
            logger.debug("%s contributed %d rows.", file_path.name, len(data))
    return rows


def merge_json_to_excel(folder: Path, spreadsheet: Optional[SpreadsheetDelegate] = None) -> Path:
    """Merges ``<folder>/*.json`` into ``<folder>/merged_data.xlsx`` and returns its path."""
    logger.info("Merging JSON files into Excel...")
    file_manager = FileManagerDelegate(folder)
    file_manager.ensure_folder()
    spreadsheet = spreadsheet or SpreadsheetDelegate()
    rows = collect_rows(file_manager)
    output_path = spreadsheet.write_rows(rows, file_manager.merged_path)
    logger.info("Excel file written: %s", output_path)
    return output_path
