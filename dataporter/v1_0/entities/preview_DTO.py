from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True, slots=True)
class PreviewCell:
    key: str
    value: str


@dataclass(frozen=True, slots=True)
class PreviewRow:
    row_key: int
    cells: List[PreviewCell]


@dataclass(frozen=True, slots=True)
class PreviewTable:
    """Bounded, read-only view of the first rows of a CSV file."""
    headers: List[str] = field(default_factory=list)
    rows: List[PreviewRow] = field(default_factory=list)
