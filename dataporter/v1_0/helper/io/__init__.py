from .csv_codec import parse, split_line, split_lines, clean_field, pair_with_headers
from .transfer_codec import (
    to_transfer_payload,
    from_transfer_payload,
    to_data_url,
    decode_text,
)
from .field_order import (
    SelectionState,
    apply_selection_change,
    labels_by_api_name,
    move_up,
    move_down,
    remove_at,
    renumber,
    selection_of,
)
from .preview import build_preview, empty_preview, has_preview, DEFAULT_MAX_ROWS

__all__ = [
    "parse", "split_line", "split_lines", "clean_field", "pair_with_headers",
    "to_transfer_payload", "from_transfer_payload", "to_data_url", "decode_text",
    "SelectionState",
    "apply_selection_change",
    "labels_by_api_name",
    "move_up",
    "move_down",
    "remove_at",
    "renumber",
    "selection_of",
    "build_preview", "empty_preview", "has_preview", "DEFAULT_MAX_ROWS",
]
