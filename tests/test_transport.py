"""Tests for the signed query transport and response parsing."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List
from unittest.mock import MagicMock
from urllib.parse import parse_qsl

import pytest
import requests
from botocore.credentials import Credentials

from ec2query import utils
from ec2query.config import ClientConfig
from ec2query.exceptions import TransportError
from ec2query.transport import QueryTransport, error_from_response, parse_response

DESCRIBE_IMAGES = b"""<?xml version="1.0" encoding="UTF-8"?>
<DescribeImagesResponse xmlns="http://ec2.amazonaws.com/doc/2014-06-15/">
  <requestId>req-1</requestId>
  <imagesSet>
    <item>
      <imageId>ami-1</imageId>
      <imageState>available</imageState>
      <description/>
      <tagSet>
        <item><key>Name</key><value>web</value></item>
      </tagSet>
    </item>
  </imagesSet>
</DescribeImagesResponse>
"""

NOT_FOUND = b"""<?xml version="1.0" encoding="UTF-8"?>
<Response><Errors><Error><Code>InvalidAMIID.NotFound</Code>
<Message>The image id '[ami-1]' does not exist.</Message></Error></Errors>
<RequestID>req-2</RequestID></Response>
"""


@dataclass
class FakeResponse:
    status_code: int
    content: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass
class FakeSession:
    responses: List[Any]
    calls: List[Dict[str, Any]] = field(default_factory=list)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _transport(*responses: Any, **config: Any) -> QueryTransport:
    return QueryTransport(
        ClientConfig(**config),
        session=FakeSession(list(responses)),
        credentials=Credentials("AKIDEXAMPLE", "secret"),
    )


class TestParseResponse:
    def test_items_become_lists(self):
        raw = parse_response(DESCRIBE_IMAGES)

        images = raw["imagesSet"]["item"]
        assert raw["requestId"] == "req-1"
        assert len(images) == 1
        assert images[0]["imageId"] == "ami-1"
        assert images[0]["tagSet"]["item"] == [{"key": "Name", "value": "web"}]

    def test_empty_elements_are_none(self):
        raw = parse_response(DESCRIBE_IMAGES)

        assert raw["imagesSet"]["item"][0]["description"] is None

    def test_empty_set(self):
        raw = parse_response(b"<DescribeImagesResponse><imagesSet/></DescribeImagesResponse>")

        assert raw == {"imagesSet": None}

    def test_boolean_response(self):
        raw = parse_response(b"<DeleteVpcResponse><requestId>r</requestId><return>true</return></DeleteVpcResponse>")

        assert raw["return"] == "true"

    def test_malformed(self):
        with pytest.raises(TransportError) as excinfo:
            parse_response(b"<not xml")

        assert excinfo.value.error_code == "MalformedResponse"


class TestErrors:
    def test_error_document(self):
        error = error_from_response(400, NOT_FOUND)

        assert error.error_code == "InvalidAMIID.NotFound"
        assert error.status_code == 400
        assert error.request_id == "req-2"
        assert error.is_not_found
        assert "does not exist" in str(error)

    def test_non_xml_error_body(self):
        error = error_from_response(503, b"Service Unavailable")

        assert error.error_code == "HTTP503"
        assert not error.is_not_found


class TestQueryTransport:
    def test_body_starts_with_action_and_version(self):
        transport = _transport()

        body = transport.build_body("DescribeImages", [("ImageId.1", "ami-1"), ("Owner", "self")])

        assert parse_qsl(body.decode()) == [
            ("Action", "DescribeImages"),
            ("Version", "2014-06-15"),
            ("ImageId.1", "ami-1"),
            ("Owner", "self"),
        ]

    def test_send_signs_and_parses(self):
        transport = _transport(FakeResponse(200, DESCRIBE_IMAGES), region="eu-west-1")

        raw = transport.send("DescribeImages", [("ImageId.1", "ami-1")])

        call = transport.session.calls[0]
        assert call["url"] == "https://ec2.eu-west-1.amazonaws.com/"
        assert call["headers"]["Authorization"].startswith(
            "AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/"
        )
        assert "/eu-west-1/ec2/aws4_request" in call["headers"]["Authorization"]
        assert "X-Amz-Date" in call["headers"]
        assert call["timeout"] == 30.0
        assert raw["imagesSet"]["item"][0]["imageId"] == "ami-1"

    def test_custom_endpoint(self):
        transport = _transport(FakeResponse(200, b"<R/>"), endpoint="http://localhost:5000")

        transport.send("DescribeVpcs", [])

        assert transport.session.calls[0]["url"] == "http://localhost:5000/"

    def test_api_error_raises(self):
        transport = _transport(FakeResponse(400, NOT_FOUND))

        with pytest.raises(TransportError) as excinfo:
            transport.send("DescribeImages", [("ImageId.1", "ami-1")])

        assert excinfo.value.error_code == "InvalidAMIID.NotFound"

    def test_connection_error_raises(self):
        transport = _transport(requests.ConnectionError("refused"))

        with pytest.raises(TransportError) as excinfo:
            transport.send("DescribeImages", [])

        assert excinfo.value.error_code == "RequestFailed"
        assert isinstance(excinfo.value.original_exception, requests.ConnectionError)

    def test_credentials_from_environment(self):
        transport = QueryTransport(ClientConfig(), session=FakeSession([]))

        assert transport.credentials.access_key == "testing"


def test_missing_credentials():
    session = MagicMock()
    session.get_credentials.return_value = None

    with pytest.raises(TransportError) as excinfo:
        utils.get_credentials(session)

    assert excinfo.value.error_code == "MissingCredentials"
