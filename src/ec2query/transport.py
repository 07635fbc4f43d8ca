"""Signed HTTP transport for the EC2 Query API."""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ElementTree
from typing import Any, Dict, Optional, Protocol, Sequence, Tuple
from urllib.parse import urlencode

import boto3
import requests
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from . import utils
from .config import ClientConfig
from .exceptions import TransportError

LOG = logging.getLogger(__name__)

CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"


class Transport(Protocol):
    """Sends one action and returns the decoded response body."""

    def send(self, action: str, params: Sequence[Tuple[str, str]]) -> Dict[str, Any]:
        ...


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _element_to_value(element: ElementTree.Element) -> Any:
    children = list(element)
    if not children:
        text = (element.text or "").strip()
        return text or None

    value: Dict[str, Any] = {}
    for child in children:
        name = _local_name(child.tag)
        child_value = _element_to_value(child)
        if name == "item":
            value.setdefault("item", []).append(child_value)
        elif name in value:
            existing = value[name]
            if not isinstance(existing, list):
                value[name] = [existing]
            value[name].append(child_value)
        else:
            value[name] = child_value
    return value


def parse_response(body: bytes) -> Dict[str, Any]:
    """Decode an EC2 XML response into nested dictionaries.

    ``<item>`` elements always become list entries under an ``item`` key,
    empty elements decode to None and namespaces are dropped. The root
    element itself is unwrapped.
    """
    try:
        root = ElementTree.fromstring(body)
    except ElementTree.ParseError as exc:
        raise TransportError(
            f"Malformed response from EC2: {exc}", error_code="MalformedResponse",
            original_exception=exc,
        ) from exc
    value = _element_to_value(root)
    return value if isinstance(value, dict) else {}


def error_from_response(status_code: int, body: bytes) -> TransportError:
    """Build a TransportError from an EC2 error document."""
    try:
        parsed = parse_response(body)
    except TransportError:
        parsed = {}
    errors = parsed.get("Errors") or {}
    error = errors.get("Error") or {}
    if isinstance(error, list):
        error = error[0]
    code = error.get("Code") or f"HTTP{status_code}"
    message = (error.get("Message") or body.decode("utf-8", "replace")).rstrip(".")
    request_id = parsed.get("RequestID") or parsed.get("RequestId") or parsed.get("requestId")
    return TransportError(
        f"[{code}] {message}",
        error_code=code,
        status_code=status_code,
        request_id=request_id,
    )


class QueryTransport:
    """EC2 Query API transport: SigV4 signing via botocore, HTTP via requests."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        session: Optional[requests.Session] = None,
        boto_session: Optional[boto3.Session] = None,
        credentials: Optional[Credentials] = None,
    ) -> None:
        self.config = config or ClientConfig()
        self.session = session or requests.Session()
        self._boto_session = boto_session
        self._credentials = credentials

    @property
    def credentials(self) -> Credentials:
        if self._credentials is None:
            boto_session = self._boto_session or utils.get_session(self.config.profile_name)
            self._credentials = utils.get_credentials(boto_session)
        return self._credentials

    def build_body(self, action: str, params: Sequence[Tuple[str, str]]) -> bytes:
        pairs = [("Action", action), ("Version", self.config.api_version)]
        pairs.extend(params)
        return urlencode(pairs).encode("utf-8")

    def sign(self, body: bytes) -> Dict[str, str]:
        request = AWSRequest(
            method="POST",
            url=self.config.endpoint_url,
            data=body,
            headers={"Content-Type": CONTENT_TYPE},
        )
        SigV4Auth(self.credentials, "ec2", self.config.region).add_auth(request)
        return dict(request.headers.items())

    def send(self, action: str, params: Sequence[Tuple[str, str]]) -> Dict[str, Any]:
        body = self.build_body(action, params)
        headers = self.sign(body)
        LOG.debug("POST %s Action=%s (%d parameters)", self.config.endpoint_url, action, len(params))

        try:
            response = self.session.post(
                self.config.endpoint_url,
                data=body,
                headers=headers,
                timeout=self.config.http_timeout,
            )
        except requests.RequestException as exc:
            LOG.error("EC2 request %s failed: %s", action, exc)
            raise TransportError(
                f"Failed to call {action}: {exc}",
                error_code="RequestFailed",
                original_exception=exc,
            ) from exc

        if not response.ok:
            error = error_from_response(response.status_code, response.content)
            LOG.error("EC2 API error for %s (%s): %s", action, response.status_code, error)
            raise error

        return parse_response(response.content)
