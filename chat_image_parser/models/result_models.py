# chat_image_parser/models/result_models.py

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping

from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE


def _text(value: Any) -> Any:
    # Falsy values (missing, null, 0, "") collapse to an empty cell.
    if not value:
        return ""
    if isinstance(value, (dict, list)):
        value = json.dumps(value, ensure_ascii=False)
    if isinstance(value, str):
        # Control characters are valid in JSON strings but not in xlsx cells.
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


@dataclass
class AggregateRow:
    """One product record as it appears in the merged spreadsheet."""
    store_name: Any = ""
    product_name: Any = ""
    price: Any = ""

    @classmethod
    def from_item(cls, item: Any) -> "AggregateRow":
        """Best-effort mapping of one element of a model answer. Never raises."""
        if not isinstance(item, Mapping):
            return cls()
        return cls(
            store_name=_text(item.get("store_name") or item.get("name")),
            product_name=_text(item.get("product_name")),
            price=_text(item.get("price")),
        )

    def as_tuple(self):
        return (self.store_name, self.product_name, self.price)


@dataclass
class BatchReport:
    """Outcome of analysing a folder of images across one or more sessions."""
    analysed: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    page_loads: int = 0

    @property
    def total(self) -> int:
        return len(self.analysed) + len(self.skipped)
