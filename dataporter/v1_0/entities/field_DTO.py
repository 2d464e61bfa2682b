from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Field metadata supplied by the provider."""
    label: str
    api_name: str


@dataclass(frozen=True, slots=True)
class OrderedField:
    """One field in the user's chosen column order."""
    label: str
    api_name: str
    index: int
