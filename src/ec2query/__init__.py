"""
ec2query - A client for the AWS EC2 Query API.

This package exposes one method per EC2 action, encodes arguments into the
Query API's numbered parameter format and decodes responses into typed
objects through a registry of decode strategies.
"""

__version__ = "0.1.0"

# Import key components for easier access
from .client import EC2Client
from .config import ClientConfig
from .dispatch import Boolean, Custom, FetchItems, FetchOne, FieldExtract
from .exceptions import (
    ArgumentError,
    ConsistencyTimeoutError,
    EC2QueryError,
    TransportError,
    UnregisteredActionError,
)
from .poller import EventualConsistencyPoller, PollHandle, PollState

__all__ = [
    "EC2Client",
    "ClientConfig",
    "Boolean",
    "Custom",
    "FetchItems",
    "FetchOne",
    "FieldExtract",
    "ArgumentError",
    "ConsistencyTimeoutError",
    "EC2QueryError",
    "TransportError",
    "UnregisteredActionError",
    "EventualConsistencyPoller",
    "PollHandle",
    "PollState",
]
