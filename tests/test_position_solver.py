"""Tests for the position solver."""

import pytest

from anchor_stack.core import (
    DuplicateItemError,
    InvalidGapError,
    StackItem,
    solve_positions,
)


def build_items(ids):
    return [StackItem(id=item_id) for item_id in ids]


def solve(anchors, heights=None, selected_id=None, gap=0):
    """Solve for items given as {id: anchor_top}, in dict order."""
    if heights is None:
        heights = {item_id: 20 for item_id in anchors}
    return solve_positions(build_items(anchors), anchors, heights, selected_id, gap)


def tops(result):
    return {item_id: position.top for item_id, position in result.positions.items()}


def stacked(result):
    return {item_id: position.is_stacked for item_id, position in result.positions.items()}


def test_empty_input_returns_empty_result():
    result = solve_positions([], {}, {}, None, 0)

    assert result.positions == {}
    assert result.sorted_items == []


def test_items_without_collisions_stay_on_their_anchors():
    result = solve({"a": 0, "b": 40})

    assert tops(result) == {"a": 0, "b": 40}
    assert stacked(result) == {"a": False, "b": False}


def test_overlapping_items_stack_below_each_other():
    result = solve({"a": 0, "b": 5, "c": 9})

    assert tops(result) == {"a": 0, "b": 20, "c": 40}
    assert stacked(result) == {"a": False, "b": True, "c": True}


def test_selected_item_keeps_anchor_and_pushes_previous_up():
    result = solve({"a": 0, "b": 0}, selected_id="b")

    assert result.positions["b"].top == 0
    assert result.positions["b"].is_stacked is False
    assert result.positions["a"].top == -20
    assert result.positions["a"].is_stacked is True


def test_selected_item_respects_gap_when_pushing_up():
    result = solve({"a": 0, "b": 0}, selected_id="b", gap=6)

    assert result.positions["b"].top == 0
    assert result.positions["a"].top == -26


def test_gap_is_kept_between_stacked_items():
    result = solve({"a": 0, "b": 0}, gap=6)

    assert result.positions["b"].top == 26


def test_sorted_items_follow_anchor_order():
    result = solve({"a": 50, "b": 10, "c": 30})

    assert [item.id for item in result.sorted_items] == ["b", "c", "a"]


def test_equal_anchors_keep_input_order():
    items = build_items(["z", "y", "x"])
    anchors = {"z": 10, "y": 10, "x": 10}
    result = solve_positions(items, anchors, {}, None, 0)

    assert [item.id for item in result.sorted_items] == ["z", "y", "x"]


def test_sorted_items_are_the_callers_objects():
    items = [StackItem(id="a", data={"text": "first"}), StackItem(id="b", data=["second"])]
    result = solve_positions(items, {"a": 30, "b": 0}, {}, None, 0)

    assert result.sorted_items[0] is items[1]
    assert result.sorted_items[1] is items[0]
    assert items[0].data == {"text": "first"}


def test_missing_height_counts_as_zero():
    items = build_items(["a", "b"])
    result = solve_positions(items, {"a": 0, "b": 0}, {}, None, 5)

    assert tops(result) == {"a": 0, "b": 5}
    assert stacked(result) == {"a": False, "b": True}


def test_relief_pass_stops_at_first_predecessor_with_room():
    # a is far above; b and c collide with the selected d
    anchors = {"a": 0, "b": 100, "c": 110, "d": 115}
    result = solve(anchors, selected_id="d")

    assert result.positions["d"].top == 115
    assert result.positions["c"].top == 95
    assert result.positions["b"].top == 75
    assert result.positions["a"].top == 0
    assert result.positions["a"].is_stacked is False


def test_relief_pass_can_move_item_back_onto_its_anchor():
    # b is pushed down to 20 by a, then pulled up to exactly its anchor by c
    anchors = {"a": 0, "b": 10, "c": 30}
    heights = {"a": 20, "b": 20, "c": 20}
    result = solve_positions(build_items(anchors), anchors, heights, "c", 0)

    assert result.positions["c"].top == 30
    assert result.positions["b"].top == 10
    assert result.positions["b"].is_stacked is False
    assert result.positions["a"].top == -10
    assert result.positions["a"].is_stacked is True


def test_items_after_selected_use_forward_placement():
    anchors = {"a": 0, "b": 0, "c": 5}
    result = solve(anchors, selected_id="b")

    assert result.positions["a"].top == -20
    assert result.positions["b"].top == 0
    assert result.positions["c"].top == 20
    assert result.positions["c"].is_stacked is True


def test_selected_item_without_collision_triggers_no_relief():
    result = solve({"a": 0, "b": 40}, selected_id="b")

    assert tops(result) == {"a": 0, "b": 40}
    assert stacked(result) == {"a": False, "b": False}


def test_unknown_selected_id_is_ignored():
    result = solve({"a": 0, "b": 0}, selected_id="missing")

    assert tops(result) == {"a": 0, "b": 20}


def test_float_positions_are_not_rounded():
    result = solve({"a": 0.25, "b": 0.5}, heights={"a": 10.5, "b": 3.0}, gap=0.125)

    assert result.positions["b"].top == pytest.approx(10.875)


def test_solver_is_idempotent():
    anchors = {"a": 12, "b": 3, "c": 14, "d": 14}
    heights = {"a": 30, "b": 8, "c": 5, "d": 11}
    items = build_items(anchors)

    first = solve_positions(items, anchors, heights, "c", 4)
    second = solve_positions(items, anchors, heights, "c", 4)

    assert first.positions == second.positions
    assert first.sorted_items == second.sorted_items


def test_no_overlap_between_consecutive_items():
    anchors = {"a": 0, "b": 3, "c": 3, "d": 50, "e": 52, "f": 53}
    heights = {"a": 15, "b": 22, "c": 7, "d": 30, "e": 2, "f": 9}
    gap = 3
    result = solve_positions(build_items(anchors), anchors, heights, "e", gap)

    ordered = sorted(result.positions.values(), key=lambda position: position.top)
    for upper, lower in zip(ordered, ordered[1:]):
        assert lower.top >= upper.top + heights[upper.id] + gap
    assert result.positions["e"].top == 52
    assert result.positions["e"].is_stacked is False


def test_duplicate_ids_are_rejected():
    items = [StackItem(id="a"), StackItem(id="a")]

    with pytest.raises(DuplicateItemError) as excinfo:
        solve_positions(items, {"a": 0}, {}, None, 0)

    assert excinfo.value.item_id == "a"


def test_negative_gap_is_rejected():
    with pytest.raises(InvalidGapError):
        solve_positions(build_items(["a"]), {"a": 0}, {}, None, -1)


def test_item_without_anchor_raises_key_error():
    with pytest.raises(KeyError):
        solve_positions(build_items(["a", "b"]), {"a": 0}, {}, None, 0)
