"""Tests for the eventual-consistency poller."""
from __future__ import annotations

import threading
import time

import pytest

from ec2query.exceptions import ConsistencyTimeoutError
from ec2query.poller import EventualConsistencyPoller, PollState
from tests.utils import FakeClock


class RecordingDescribe:
    """Describe stub returning None for the first ``misses`` calls."""

    def __init__(self, clock=None, misses: int = 0, result: str = "found"):
        self.clock = clock
        self.misses = misses
        self.result = result
        self.calls = []

    def __call__(self, resource_id):
        self.calls.append(self.clock() if self.clock else resource_id)
        if len(self.calls) <= self.misses:
            return None
        return self.result


def _fast_poller(**kwargs) -> EventualConsistencyPoller:
    options = dict(interval=0.01, deadline=5.0, initial_delay=0.0)
    options.update(kwargs)
    return EventualConsistencyPoller(**options)


class TestBlockingWait:
    def test_found_after_three_misses(self, clock):
        poller = EventualConsistencyPoller(clock=clock, sleep=clock.sleep)
        describe = RecordingDescribe(clock, misses=3)

        assert poller.wait("ami-1", describe) == "found"
        assert len(describe.calls) == 4
        assert clock.sleeps == [0.5, 1.0, 1.0, 1.0]

    def test_found_immediately(self, clock):
        poller = EventualConsistencyPoller(clock=clock, sleep=clock.sleep)
        describe = RecordingDescribe(clock)

        assert poller.wait("sg-1", describe) == "found"
        assert describe.calls == [0.5]

    def test_times_out_without_calls_past_deadline(self, clock):
        poller = EventualConsistencyPoller(clock=clock, sleep=clock.sleep)
        describe = RecordingDescribe(clock, misses=10_000)

        with pytest.raises(ConsistencyTimeoutError) as excinfo:
            poller.wait("ami-1", describe)

        assert excinfo.value.resource_id == "ami-1"
        assert excinfo.value.elapsed >= 60.0
        assert max(describe.calls) < 60.0
        assert len(describe.calls) == 60

    def test_timeout_is_a_builtin_timeout(self, clock):
        poller = EventualConsistencyPoller(deadline=3.0, clock=clock, sleep=clock.sleep)

        with pytest.raises(TimeoutError):
            poller.wait("ami-1", RecordingDescribe(clock, misses=100))

    def test_describe_errors_propagate(self, clock):
        poller = EventualConsistencyPoller(clock=clock, sleep=clock.sleep)

        def describe(resource_id):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            poller.wait("ami-1", describe)


class TestNonBlocking:
    def test_submit_returns_result(self):
        describe = RecordingDescribe(misses=2)

        handle = _fast_poller().submit("ami-1", describe)

        assert handle.result(timeout=5) == "found"
        assert handle.state is PollState.FOUND
        assert handle.done()
        assert handle.attempts == 3
        assert len(describe.calls) == 3

    def test_submit_matches_blocking_result(self, clock):
        blocking = EventualConsistencyPoller(clock=clock, sleep=clock.sleep)

        blocking_result = blocking.wait("ami-1", RecordingDescribe(misses=1, result="image"))
        handle = _fast_poller().submit("ami-1", RecordingDescribe(misses=1, result="image"))

        assert handle.result(timeout=5) == blocking_result

    def test_submit_times_out(self):
        handle = _fast_poller(deadline=0.05).submit("ami-1", RecordingDescribe(misses=10_000))

        with pytest.raises(ConsistencyTimeoutError):
            handle.result(timeout=5)
        assert handle.state is PollState.TIMED_OUT

    def test_describe_failure(self):
        def describe(resource_id):
            raise RuntimeError("describe failed")

        handle = _fast_poller().submit("ami-1", describe)

        with pytest.raises(RuntimeError, match="describe failed"):
            handle.result(timeout=5)
        assert handle.state is PollState.FAILED

    def test_cancel_before_first_check(self):
        describe = RecordingDescribe()
        handle = _fast_poller(initial_delay=10.0).submit("ami-1", describe)

        assert handle.cancel() is True

        assert handle.cancelled()
        assert handle.result(timeout=1) is None
        assert describe.calls == []

    def test_cancel_suppresses_in_flight_check(self):
        started, release = threading.Event(), threading.Event()
        calls = []

        def describe(resource_id):
            calls.append(resource_id)
            started.set()
            release.wait(5)
            return "found"

        handle = _fast_poller().submit("ami-1", describe)
        assert started.wait(5)

        handle.cancel()
        release.set()
        time.sleep(0.1)

        assert handle.state is PollState.CANCELLED
        assert handle.result(timeout=1) is None
        assert calls == ["ami-1"]

    def test_cancel_after_completion(self):
        handle = _fast_poller().submit("ami-1", RecordingDescribe())
        handle.result(timeout=5)

        assert handle.cancel() is False
        assert handle.state is PollState.FOUND

    def test_result_wait_can_time_out(self):
        handle = _fast_poller(initial_delay=10.0).submit("ami-1", RecordingDescribe())

        with pytest.raises(TimeoutError):
            handle.result(timeout=0.01)
        handle.cancel()

    def test_done_callbacks(self):
        finished = threading.Event()
        seen = []

        def on_done(handle):
            seen.append(handle.state)
            finished.set()

        handle = _fast_poller().submit("ami-1", RecordingDescribe(misses=1))
        handle.add_done_callback(on_done)

        assert finished.wait(5)
        assert seen == [PollState.FOUND]

        late = []
        handle.add_done_callback(lambda h: late.append(h.state))
        assert late == [PollState.FOUND]


def test_fake_clock_only_moves_on_sleep():
    clock = FakeClock()
    clock.sleep(2.5)

    assert clock() == 2.5
