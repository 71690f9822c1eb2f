"""Tests for selection ownership."""

import pytest

from anchor_stack import AnchorStack, SelectionController, StackItem
from fakes import FakeElement


@pytest.fixture
def stack(fake_host):
    anchors = {"a": FakeElement(top=0), "b": FakeElement(top=0)}
    stack = AnchorStack(
        [StackItem(id="a"), StackItem(id="b")],
        anchor_resolver=lambda item: anchors[item.id],
        gap=0,
        host=fake_host,
    )
    stack.handles.get("a").current = FakeElement(height=20)
    stack.handles.get("b").current = FakeElement(height=20)
    fake_host.run_frames()
    return stack


def test_uncontrolled_starts_from_initial_selection(stack):
    controller = SelectionController(stack, initial_selected_id="b")

    assert controller.is_controlled is False
    assert controller.selected_id == "b"
    assert stack.selected_id == "b"


def test_uncontrolled_set_updates_stack(stack, fake_host):
    requests = []
    controller = SelectionController(stack, on_selected_id_change=requests.append)

    controller.set_selected_id("b")
    fake_host.run_frames()

    assert controller.selected_id == "b"
    assert stack.positions["b"].top == 0
    assert stack.positions["a"].top == -20
    assert requests == []


def test_controlled_set_only_reports_request(stack):
    requests = []
    controller = SelectionController(stack, selected_id=None, on_selected_id_change=requests.append)

    controller.set_selected_id("a")

    assert controller.is_controlled is True
    assert requests == ["a"]
    assert controller.selected_id is None
    assert stack.selected_id is None


def test_controlled_sync_applies_owner_value(stack):
    controller = SelectionController(stack, selected_id="a")

    controller.sync_selected_id("b")

    assert controller.selected_id == "b"
    assert stack.selected_id == "b"


def test_sync_is_rejected_in_uncontrolled_mode(stack):
    controller = SelectionController(stack)

    with pytest.raises(RuntimeError):
        controller.sync_selected_id("a")


def test_select_and_prepare_recomputes_immediately(stack, fake_host):
    controller = SelectionController(stack)

    controller.select_and_prepare("b")

    assert fake_host.frames == {}
    assert stack.positions["a"].top == -20
    assert stack.positions["b"].is_stacked is False


def test_controlled_none_falls_back_to_initial_selection(stack):
    controller = SelectionController(stack, selected_id=None, initial_selected_id="b")

    assert controller.selected_id == "b"
    assert stack.selected_id == "b"

    controller.sync_selected_id("a")
    assert stack.selected_id == "a"

    controller.sync_selected_id(None)
    assert controller.selected_id == "b"
    assert stack.selected_id == "b"
