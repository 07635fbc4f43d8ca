"""Exception hierarchy for ec2query."""
from __future__ import annotations

from typing import Optional


class EC2QueryError(Exception):
    """Base exception for ec2query operations."""
    pass


class ArgumentError(EC2QueryError, ValueError):
    """Raised when a required option is missing or malformed.

    Always raised before any request is sent.
    """

    def __init__(self, option: str, operation: str, message: Optional[str] = None):
        self.option = option
        self.operation = operation
        super().__init__(message or f"{operation}(): {option} argument missing")


class UnregisteredActionError(EC2QueryError, LookupError):
    """Raised when an action has no bound decode strategy."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"No decode strategy registered for action '{action}'")


class TransportError(EC2QueryError):
    """Raised when the EC2 endpoint rejects a request or cannot be reached."""

    def __init__(
        self,
        message: str,
        error_code: str = None,
        status_code: int = None,
        request_id: str = None,
        original_exception: Exception = None,
    ):
        self.error_code = error_code
        self.status_code = status_code
        self.request_id = request_id
        self.original_exception = original_exception
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        """True for the ``*.NotFound`` family of AWS error codes."""
        return bool(self.error_code) and self.error_code.endswith("NotFound")


class ConsistencyTimeoutError(EC2QueryError, TimeoutError):
    """Raised when a newly created resource never became describable."""

    def __init__(self, resource_id: str, elapsed: float):
        self.resource_id = resource_id
        self.elapsed = elapsed
        super().__init__(
            f"Timed out after {elapsed:.1f}s waiting for '{resource_id}' to become visible"
        )
