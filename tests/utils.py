"""Test utilities for ec2query tests."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

from ec2query.client import EC2Client
from ec2query.config import ClientConfig
from ec2query.poller import EventualConsistencyPoller


class FakeTransport:
    """Records every call and replays canned responses per action.

    A queued response that is an exception instance is raised instead of
    returned. The last response queued for an action is reused once the
    queue runs dry.
    """

    def __init__(self, responses: Dict[str, Any] = None) -> None:
        self.responses: Dict[str, List[Any]] = {}
        self.calls: List[Tuple[str, List[Tuple[str, str]]]] = []
        for action, response in (responses or {}).items():
            self.queue(action, response)

    def queue(self, action: str, *responses: Any) -> None:
        for response in responses:
            self.responses.setdefault(action, []).append(response)

    def send(self, action: str, params: Sequence[Tuple[str, str]]) -> Dict[str, Any]:
        self.calls.append((action, list(params)))
        queued = self.responses.get(action) or [{}]
        response = queued.pop(0) if len(queued) > 1 else queued[0]
        if isinstance(response, Exception):
            raise response
        return response

    def params_for(self, action: str) -> List[Tuple[str, str]]:
        return [params for name, params in self.calls if name == action][-1]

    def actions(self) -> List[str]:
        return [name for name, _ in self.calls]


class FakeClock:
    """Monotonic clock advanced only by ``sleep``."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def make_client(transport: FakeTransport, clock: FakeClock = None, **kwargs: Any) -> EC2Client:
    """EC2Client over a fake transport with an instant, fake-clock poller."""
    clock = clock or FakeClock()
    poller = EventualConsistencyPoller(clock=clock, sleep=clock.sleep)
    return EC2Client(ClientConfig(), transport=transport, poller=poller, **kwargs)
