# chat_image_parser/delegates/spreadsheet_delegate.py
import logging
from pathlib import Path
from typing import Iterable, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from .. import config
from ..models import AggregateRow

logger = logging.getLogger(__name__)


class SpreadsheetDelegate:
    """Writes aggregate rows to a single-sheet Excel workbook."""
    def __init__(self, sheet_name: str = config.SHEET_NAME, columns: Sequence[str] = config.COLUMNS):
        self.sheet_name = sheet_name
        self.columns = tuple(columns)

    def write_rows(self, rows: Iterable[AggregateRow], output_path: Path) -> Path:
        wb = Workbook()
        ws = wb.active
        ws.title = self.sheet_name

        ws.append(list(self.columns))
        for cell in ws[1]:
            cell.font = Font(bold=True)

        count = 0
        for row in rows:
            ws.append(list(row.as_tuple()))
            count += 1

        for col_idx, column in enumerate(self.columns, start=1):
            ws.column_dimensions[get_column_letter(col_idx)].width = max(len(column) + 4, 20)

        # Overwrites any earlier workbook of the same name.
        wb.save(output_path)
        logger.info("Wrote %d rows to %s", count, output_path)
        return Path(output_path)
