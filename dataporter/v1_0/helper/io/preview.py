from typing import Optional

from dataporter.v1_0.entities.preview_DTO import PreviewTable
from .csv_codec import parse

DEFAULT_MAX_ROWS = 10


def build_preview(raw_text: Optional[str], max_rows: int = DEFAULT_MAX_ROWS) -> PreviewTable:
    """First `max_rows` data rows of the CSV text; row keys keep their original position."""
    return parse(raw_text, max_rows=max_rows)


def empty_preview() -> PreviewTable:
    return PreviewTable(headers=[], rows=[])


def has_preview(table: PreviewTable) -> bool:
    return bool(table.headers)
