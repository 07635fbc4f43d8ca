"""Common utilities for the ec2query package."""
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional

import boto3
from botocore.credentials import Credentials

from .exceptions import TransportError

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def get_session(profile_name: Optional[str] = None) -> boto3.Session:
    """Get a boto3 session, optionally bound to a named profile."""
    return boto3.Session(profile_name=profile_name)


def get_credentials(session: Optional[boto3.Session] = None) -> Credentials:
    """Resolve credentials through the boto3 credential chain.

    Args:
        session: Optional pre-configured boto3 session

    Returns:
        Frozen botocore credentials

    Raises:
        TransportError: If no credentials can be found
    """
    session = session or get_session()
    credentials = session.get_credentials()
    if credentials is None:
        raise TransportError(
            "Unable to locate AWS credentials", error_code="MissingCredentials"
        )
    return credentials.get_frozen_credentials()


def canonicalize(name: str) -> str:
    """Convert an AWS field or option name to its snake_case option name.

    ``ImageId`` -> ``image_id``, ``-group_name`` -> ``group_name``,
    ``ipPermissionsEgress`` -> ``ip_permissions_egress``.
    """
    name = name.lstrip("-")
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def uncanonicalize(name: str) -> str:
    """Convert a snake_case name to the lowerCamelCase used in EC2 responses."""
    head, *rest = name.lstrip("-").split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def as_list(value: Any) -> List[Any]:
    """Promote a scalar to a one-element list; ``None`` becomes ``[]``."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def first(values: Iterable[Any]) -> Any:
    """Return the first element of an iterable, or None if it is empty."""
    return next(iter(values), None)


def get_items(container: Optional[Dict[str, Any]]) -> List[Any]:
    """Extract the ``item`` list from an EC2 ``...Set`` container.

    EC2 omits empty collections from responses, so every missing level
    yields an empty list.
    """
    if not isinstance(container, dict):
        return []
    return as_list(container.get("item"))


def tags_to_dict(tag_set: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Flatten a ``tagSet`` container into a key/value dictionary.

    Args:
        tag_set: Raw ``tagSet`` element from a response

    Returns:
        Mapping of tag key to tag value (empty values become "")
    """
    return {
        item.get("key"): item.get("value") or ""
        for item in get_items(tag_set)
        if isinstance(item, dict) and item.get("key")
    }
