"""Pytest configuration and fixtures for ec2query tests."""

import os

import pytest

from tests.utils import FakeClock, FakeTransport, make_client


@pytest.fixture(autouse=True)
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def transport():
    """Fake transport recording calls."""
    return FakeTransport()


@pytest.fixture
def clock():
    """Fake clock for deterministic polling."""
    return FakeClock()


@pytest.fixture
def client(transport, clock):
    """EC2Client wired to the fake transport and clock."""
    return make_client(transport, clock)


@pytest.fixture
def mock_cli_runner():
    """CLI runner for testing Click commands."""
    from click.testing import CliRunner

    return CliRunner()
