"""Tests for ordered field selection."""

import pytest

from dataporter.v1_0.entities import FieldDescriptor, OrderedField
from dataporter.v1_0.helper.io import (
    SelectionState,
    apply_selection_change,
    labels_by_api_name,
    move_down,
    move_up,
    remove_at,
)

LABELS = {"Name": "Account Name", "Phone": "Phone", "Industry": "Industry", "Website": "Website"}


def _apis(order):
    return [f.api_name for f in order]


def _assert_contiguous(order):
    assert [f.index for f in order] == list(range(len(order)))


def test_new_fields_are_appended_in_widget_order():
    order = apply_selection_change(["Phone", "Name"], [], LABELS)

    assert order == [
        OrderedField(label="Phone", api_name="Phone", index=0),
        OrderedField(label="Account Name", api_name="Name", index=1),
    ]


def test_surviving_fields_keep_relative_order():
    first = apply_selection_change(["Name", "Phone", "Industry"], [], LABELS)
    user_order = move_down(first, 0)  # Phone, Name, Industry

    # widget reports its own (different) order and drops Industry
    order = apply_selection_change(["Name", "Website", "Phone"], user_order, LABELS)

    assert _apis(order) == ["Phone", "Name", "Website"]
    _assert_contiguous(order)


@pytest.mark.parametrize(
    "sequence",
    [
        [["Name"], ["Name", "Phone"], ["Phone"], ["Phone", "Industry", "Name"]],
        [["Website", "Name"], [], ["Industry"]],
        [["Name", "Name", "Phone"]],
    ],
)
def test_output_matches_selection_without_duplicates(sequence):
    order = []
    for selection in sequence:
        order = apply_selection_change(selection, order, LABELS)
        assert set(_apis(order)) == set(selection)
        assert len(_apis(order)) == len(set(selection))
        _assert_contiguous(order)


def test_applying_same_selection_twice_is_idempotent():
    once = apply_selection_change(["Industry", "Name"], [], LABELS)
    twice = apply_selection_change(["Industry", "Name"], once, LABELS)

    assert once == twice


def test_unknown_label_falls_back_to_api_name():
    order = apply_selection_change(["Custom__c"], [], LABELS)

    assert order[0].label == "Custom__c"


def test_inputs_are_not_mutated():
    previous = apply_selection_change(["Name", "Phone"], [], LABELS)
    snapshot = list(previous)

    apply_selection_change(["Phone"], previous, LABELS)
    move_up(previous, 1)
    remove_at(previous, 0)

    assert previous == snapshot


def test_move_up_and_down_swap_neighbours():
    order = apply_selection_change(["Name", "Phone", "Industry"], [], LABELS)

    assert _apis(move_up(order, 2)) == ["Name", "Industry", "Phone"]
    assert _apis(move_down(order, 0)) == ["Phone", "Name", "Industry"]
    _assert_contiguous(move_up(order, 1))


def test_moves_at_the_edges_are_noops():
    order = apply_selection_change(["Name", "Phone", "Industry"], [], LABELS)

    assert move_up(order, 0) == order
    assert move_down(order, 2) == order


def test_invalid_position_raises_index_error():
    order = apply_selection_change(["Name"], [], LABELS)

    with pytest.raises(IndexError):
        move_up(order, 1)
    with pytest.raises(IndexError):
        move_down(order, -1)
    with pytest.raises(IndexError):
        remove_at([], 0)


def test_remove_at_returns_projected_selection():
    order = apply_selection_change(["Name", "Phone", "Industry"], [], LABELS)

    new_order, selected = remove_at(order, 1)

    assert _apis(new_order) == ["Name", "Industry"]
    assert selected == ["Name", "Industry"]
    _assert_contiguous(new_order)


def test_selection_state_keeps_set_and_order_in_sync():
    fields = [FieldDescriptor(label=v, api_name=k) for k, v in LABELS.items()]
    state = SelectionState(fields)

    state.apply(["Name", "Phone", "Website"])
    state.move_down(0)
    state.remove(2)

    assert _apis(state.order) == ["Phone", "Name"]
    assert state.selected == ["Phone", "Name"]
    assert state.order[1].label == "Account Name"


def test_labels_by_api_name():
    fields = [FieldDescriptor(label="Phone", api_name="Phone")]

    assert labels_by_api_name(fields) == {"Phone": "Phone"}
