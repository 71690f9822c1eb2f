"""Tests for the frame coalescer."""

from anchor_stack.core import FrameCoalescer


class ManualFrames:
    def __init__(self):
        self.pending = {}
        self.cancelled = []
        self._next = 0

    def request(self, callback):
        token = self._next
        self._next += 1
        self.pending[token] = callback
        return token

    def cancel(self, token):
        self.pending.pop(token, None)
        self.cancelled.append(token)

    def fire_all(self):
        pending, self.pending = self.pending, {}
        for callback in pending.values():
            callback()


def test_triggers_while_armed_are_coalesced():
    frames = ManualFrames()
    calls = []
    coalescer = FrameCoalescer(frames.request, frames.cancel, lambda: calls.append(1))

    assert coalescer.trigger() is True
    assert coalescer.trigger() is False
    assert coalescer.trigger() is False
    assert len(frames.pending) == 1
    assert calls == []

    frames.fire_all()

    assert calls == [1]
    assert coalescer.armed is False


def test_trigger_after_fire_arms_again():
    frames = ManualFrames()
    calls = []
    coalescer = FrameCoalescer(frames.request, frames.cancel, lambda: calls.append(1))

    coalescer.trigger()
    frames.fire_all()
    coalescer.trigger()
    frames.fire_all()

    assert calls == [1, 1]


def test_cancel_drops_pending_frame():
    frames = ManualFrames()
    calls = []
    coalescer = FrameCoalescer(frames.request, frames.cancel, lambda: calls.append(1))

    coalescer.trigger()
    coalescer.cancel()

    assert frames.cancelled == [0]
    assert coalescer.armed is False
    frames.fire_all()
    assert calls == []


def test_cancel_without_pending_frame_does_nothing():
    frames = ManualFrames()
    coalescer = FrameCoalescer(frames.request, frames.cancel, lambda: None)

    coalescer.cancel()

    assert frames.cancelled == []


def test_force_runs_now_and_cancels_pending():
    frames = ManualFrames()
    calls = []
    coalescer = FrameCoalescer(frames.request, frames.cancel, lambda: calls.append(1))

    coalescer.trigger()
    coalescer.force()

    assert calls == [1]
    assert frames.pending == {}
    assert coalescer.armed is False
