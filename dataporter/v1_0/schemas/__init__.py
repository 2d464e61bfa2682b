from .porter_schema import (
    FieldOut,
    ImportResultIn,
    BackendErrorBody,
    SessionCreate,
    SelectionUpdate,
)

__all__ = [
    "FieldOut",
    "ImportResultIn",
    "BackendErrorBody",
    "SessionCreate",
    "SelectionUpdate",
]
