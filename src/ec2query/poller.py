"""Polling for resources that are not immediately visible after creation."""
from __future__ import annotations

import enum
import json
import logging
import threading
import time
from typing import Any, Callable, List, Optional

from .exceptions import ConsistencyTimeoutError

logger = logging.getLogger(__name__)

Describe = Callable[[str], Any]


def _log(level: int, message: str, **fields: Any) -> None:
    payload = {"message": message, **fields}
    logger.log(level, json.dumps(payload, sort_keys=True, default=str))


def _log_info(message: str, **fields: Any) -> None:
    _log(logging.INFO, message, **fields)


def _log_debug(message: str, **fields: Any) -> None:
    _log(logging.DEBUG, message, **fields)


def _log_warning(message: str, **fields: Any) -> None:
    _log(logging.WARNING, message, **fields)


class PollState(str, enum.Enum):
    PENDING = "pending"
    FOUND = "found"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"
    FAILED = "failed"


class PollHandle:
    """Result of a non-blocking poll.

    Checks run on ``threading.Timer`` threads. ``cancel()`` stops further
    checks and discards the outcome of a check already in flight.
    """

    def __init__(
        self,
        resource_id: str,
        describe: Describe,
        *,
        interval: float,
        deadline: float,
        initial_delay: float,
        clock: Callable[[], float],
    ) -> None:
        self.resource_id = resource_id
        self._describe = describe
        self._interval = interval
        self._deadline = deadline
        self._initial_delay = initial_delay
        self._clock = clock
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._timer: Optional[threading.Timer] = None
        self._callbacks: List[Callable[["PollHandle"], Any]] = []
        self._started = clock()
        self._state = PollState.PENDING
        self._result: Any = None
        self._error: Optional[BaseException] = None
        self.attempts = 0

    @property
    def state(self) -> PollState:
        return self._state

    def start(self) -> "PollHandle":
        self._schedule(self._initial_delay)
        return self

    def _schedule(self, delay: float) -> None:
        with self._lock:
            if self._state is not PollState.PENDING:
                return
            self._timer = threading.Timer(delay, self._check)
            self._timer.daemon = True
            self._timer.start()

    def _finish(self, state: PollState, result: Any = None, error: BaseException = None) -> None:
        with self._lock:
            if self._state is not PollState.PENDING:
                return
            self._state = state
            self._result = result
            self._error = error
            callbacks = list(self._callbacks)
        self._done.set()
        for callback in callbacks:
            callback(self)

    def _check(self) -> None:
        if self._state is not PollState.PENDING:
            return
        elapsed = self._clock() - self._started
        if elapsed >= self._deadline:
            _log_warning("poll deadline exceeded", resource_id=self.resource_id, elapsed=elapsed)
            self._finish(
                PollState.TIMED_OUT, error=ConsistencyTimeoutError(self.resource_id, elapsed)
            )
            return

        self.attempts += 1
        try:
            result = self._describe(self.resource_id)
        except Exception as exc:
            self._finish(PollState.FAILED, error=exc)
            return

        if result:
            _log_info(
                "resource visible",
                resource_id=self.resource_id,
                attempts=self.attempts,
                elapsed=self._clock() - self._started,
            )
            self._finish(PollState.FOUND, result=result)
            return

        _log_debug("resource not visible yet", resource_id=self.resource_id, attempts=self.attempts)
        self._schedule(self._interval)

    def cancel(self) -> bool:
        """Stop polling. Returns False if the poll had already finished."""
        with self._lock:
            if self._state is not PollState.PENDING:
                return self._state is PollState.CANCELLED
            if self._timer is not None:
                self._timer.cancel()
            self._state = PollState.CANCELLED
            callbacks = list(self._callbacks)
        self._done.set()
        _log_info("poll cancelled", resource_id=self.resource_id, attempts=self.attempts)
        for callback in callbacks:
            callback(self)
        return True

    def cancelled(self) -> bool:
        return self._state is PollState.CANCELLED

    def done(self) -> bool:
        return self._done.is_set()

    def add_done_callback(self, fn: Callable[["PollHandle"], Any]) -> None:
        with self._lock:
            if self._state is PollState.PENDING:
                self._callbacks.append(fn)
                return
        fn(self)

    def result(self, timeout: Optional[float] = None) -> Any:
        """Wait for the outcome.

        Returns the described resource, or None if the poll was cancelled.

        Raises:
            ConsistencyTimeoutError: If the resource never became visible
            TimeoutError: If ``timeout`` elapsed before the poll finished
        """
        if not self._done.wait(timeout):
            raise TimeoutError(f"Poll for '{self.resource_id}' still pending")
        if self._error is not None:
            raise self._error
        return self._result


class EventualConsistencyPoller:
    """Repeatedly describes a resource until it appears or a deadline passes."""

    def __init__(
        self,
        interval: float = 1.0,
        deadline: float = 60.0,
        initial_delay: float = 0.5,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        self.interval = interval
        self.deadline = deadline
        self.initial_delay = initial_delay
        self.clock = clock
        self.sleep = sleep

    def wait(self, resource_id: str, describe: Describe) -> Any:
        """Block until ``describe(resource_id)`` returns a non-empty result.

        Args:
            resource_id: Identifier returned by the creation call
            describe: Describe-by-id callable; falsy results mean "not yet"

        Returns:
            The first non-empty describe result

        Raises:
            ConsistencyTimeoutError: If the deadline elapses first
        """
        started = self.clock()
        attempts = 0
        _log_info("waiting for resource", resource_id=resource_id, deadline=self.deadline)
        self.sleep(self.initial_delay)
        while True:
            elapsed = self.clock() - started
            if elapsed >= self.deadline:
                _log_warning("poll deadline exceeded", resource_id=resource_id, elapsed=elapsed)
                raise ConsistencyTimeoutError(resource_id, elapsed)

            attempts += 1
            result = describe(resource_id)
            if result:
                _log_info(
                    "resource visible",
                    resource_id=resource_id,
                    attempts=attempts,
                    elapsed=self.clock() - started,
                )
                return result

            _log_debug("resource not visible yet", resource_id=resource_id, attempts=attempts)
            self.sleep(self.interval)

    def submit(self, resource_id: str, describe: Describe) -> PollHandle:
        """Start polling in the background and return a handle to the outcome."""
        _log_info("polling for resource", resource_id=resource_id, deadline=self.deadline)
        handle = PollHandle(
            resource_id,
            describe,
            interval=self.interval,
            deadline=self.deadline,
            initial_delay=self.initial_delay,
            clock=self.clock,
        )
        return handle.start()
