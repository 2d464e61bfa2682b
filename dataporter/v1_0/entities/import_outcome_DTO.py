from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True, slots=True)
class ImportOutcome:
    """Raw result reported by the import backend for one attempt."""
    succeeded: bool
    inserted_count: int = 0
    failed_count: int = 0
    errors: List[str] = field(default_factory=list)
