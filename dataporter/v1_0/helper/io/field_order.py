"""
Ordered field selection.

Multi-select widgets report an unordered set on every change. The functions
here rebuild the user's column order from that set and the previous order:
surviving fields keep their relative position, new ones go to the end in the
order the widget reported them. All functions are pure and return new lists.
"""
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from dataporter.v1_0.entities.field_DTO import FieldDescriptor, OrderedField


def labels_by_api_name(fields: Iterable[FieldDescriptor]) -> Dict[str, str]:
    return {f.api_name: f.label for f in fields}


def renumber(order: Iterable[OrderedField]) -> List[OrderedField]:
    return [OrderedField(label=f.label, api_name=f.api_name, index=i) for i, f in enumerate(order)]


def selection_of(order: Sequence[OrderedField]) -> List[str]:
    """Flat selection projected from an ordered list."""
    return [f.api_name for f in order]


def apply_selection_change(
    new_selection: Iterable[str],
    previous_order: Sequence[OrderedField],
    labels: Mapping[str, str],
) -> List[OrderedField]:
    """
    Reconcile a new unordered selection with the previous order.

    Args:
        new_selection: api names as reported by the widget, in widget order.
        previous_order: current ordered list (may be empty).
        labels: api name -> display label lookup.

    Returns:
        New ordered list containing exactly the members of `new_selection`,
        no duplicates, indexes renumbered 0..n-1.
    """
    wanted: List[str] = list(dict.fromkeys(new_selection))
    wanted_set = set(wanted)

    kept = [f for f in previous_order if f.api_name in wanted_set]
    present = {f.api_name for f in kept}

    added = [
        OrderedField(label=labels.get(api, api), api_name=api, index=0)
        for api in wanted
        if api not in present
    ]
    return renumber(kept + added)


def _check_position(order: Sequence[OrderedField], position: int) -> None:
    if not 0 <= position < len(order):
        raise IndexError(f"position {position} out of range for {len(order)} fields")


def _swap(order: Sequence[OrderedField], i: int, j: int) -> List[OrderedField]:
    items = list(order)
    items[i], items[j] = items[j], items[i]
    return renumber(items)


def move_up(order: Sequence[OrderedField], position: int) -> List[OrderedField]:
    _check_position(order, position)
    if position == 0:
        return renumber(order)
    return _swap(order, position, position - 1)


def move_down(order: Sequence[OrderedField], position: int) -> List[OrderedField]:
    _check_position(order, position)
    if position == len(order) - 1:
        return renumber(order)
    return _swap(order, position, position + 1)


def remove_at(order: Sequence[OrderedField], position: int) -> Tuple[List[OrderedField], List[str]]:
    """Remove one field; returns the new order and the selection derived from it."""
    _check_position(order, position)
    new_order = renumber(f for i, f in enumerate(order) if i != position)
    return new_order, selection_of(new_order)


class SelectionState:
    """Candidate fields, unordered selection and ordered list for one session."""

    def __init__(self, fields: Sequence[FieldDescriptor] = ()) -> None:
        self.fields: List[FieldDescriptor] = list(fields)
        self._labels = labels_by_api_name(self.fields)
        self.order: List[OrderedField] = []
        self.selected: List[str] = []

    def _assign(self, order: List[OrderedField]) -> List[OrderedField]:
        self.order, self.selected = order, selection_of(order)
        return order

    def apply(self, new_selection: Iterable[str]) -> List[OrderedField]:
        return self._assign(apply_selection_change(new_selection, self.order, self._labels))

    def move_up(self, position: int) -> List[OrderedField]:
        return self._assign(move_up(self.order, position))

    def move_down(self, position: int) -> List[OrderedField]:
        return self._assign(move_down(self.order, position))

    def remove(self, position: int) -> List[OrderedField]:
        order, _ = remove_at(self.order, position)
        return self._assign(order)

    @property
    def api_names(self) -> List[str]:
        return selection_of(self.order)
