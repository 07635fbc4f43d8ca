"""Unit tests for ec2query CLI module."""

from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from ec2query.cli import cli
from ec2query.exceptions import TransportError, UnregisteredActionError
from ec2query.models import ElasticAddress, Image, SecurityGroup


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "ec2query - EC2 Query API client" in result.output
    assert "images" in result.output
    assert "security-groups" in result.output
    assert "call" in result.output


@patch("ec2query.cli.EC2Client")
def test_cli_context_initialization_failure(mock_client_class, mock_cli_runner):
    mock_client_class.side_effect = Exception("no credentials")

    result = mock_cli_runner.invoke(cli, ["addresses"])

    assert result.exit_code == 1
    assert "Failed to initialize EC2 client" in result.output


@patch("ec2query.cli.EC2Client")
def test_cli_passes_region_and_endpoint(mock_client_class, mock_cli_runner):
    mock_client_class.return_value.describe_addresses.return_value = []

    result = mock_cli_runner.invoke(
        cli, ["--region", "eu-west-1", "--endpoint", "http://localhost:5000", "addresses"]
    )

    assert result.exit_code == 0
    config = mock_client_class.call_args[0][0]
    assert config.region == "eu-west-1"
    assert config.endpoint_url == "http://localhost:5000/"


@patch("ec2query.cli.EC2Client")
def test_images_command(mock_client_class, mock_cli_runner):
    client = mock_client_class.return_value
    client.describe_images.return_value = [
        Image({"imageId": "ami-12345678", "name": "web", "imageState": "available", "isPublic": "false"})
    ]

    result = mock_cli_runner.invoke(
        cli, ["images", "ami-12345678", "--owner", "self", "--filter", "state=available"]
    )

    assert result.exit_code == 0
    assert "ami-12345678" in result.output
    client.describe_images.assert_called_once_with(
        "ami-12345678", owner="self", filter={"state": ["available"]}
    )


@patch("ec2query.cli.EC2Client")
def test_images_command_empty(mock_client_class, mock_cli_runner):
    mock_client_class.return_value.describe_images.return_value = []

    result = mock_cli_runner.invoke(cli, ["images"])

    assert result.exit_code == 0
    assert "No images found." in result.output


@patch("ec2query.cli.EC2Client")
def test_images_command_error(mock_client_class, mock_cli_runner):
    mock_client_class.return_value.describe_images.side_effect = TransportError(
        "[AuthFailure] bad signature", error_code="AuthFailure"
    )

    result = mock_cli_runner.invoke(cli, ["images"])

    assert result.exit_code == 1
    assert "Failed to describe images" in result.output


@patch("ec2query.cli.EC2Client")
def test_security_groups_command(mock_client_class, mock_cli_runner):
    client = mock_client_class.return_value
    client.describe_security_groups.return_value = [
        SecurityGroup({"groupId": "sg-1", "groupName": "web", "groupDescription": "Web"})
    ]

    result = mock_cli_runner.invoke(cli, ["security-groups", "web"])

    assert result.exit_code == 0
    assert "sg-1" in result.output
    client.describe_security_groups.assert_called_once_with("web")


@patch("ec2query.cli.EC2Client")
def test_addresses_command(mock_client_class, mock_cli_runner):
    mock_client_class.return_value.describe_addresses.return_value = [
        ElasticAddress({"publicIp": "203.0.113.5", "domain": "vpc", "instanceId": "i-1"})
    ]

    result = mock_cli_runner.invoke(cli, ["addresses"])

    assert result.exit_code == 0
    assert "203.0.113.5" in result.output


@patch("ec2query.cli.EC2Client")
def test_call_command_decodes(mock_client_class, mock_cli_runner):
    client = mock_client_class.return_value
    client.call.return_value = True

    result = mock_cli_runner.invoke(cli, ["call", "DeleteVpc", "VpcId=vpc-1"])

    assert result.exit_code == 0
    assert "True" in result.output
    client.call.assert_called_once_with("DeleteVpc", [("VpcId", "vpc-1")])


@patch("ec2query.cli.EC2Client")
def test_call_command_falls_back_to_raw(mock_client_class, mock_cli_runner):
    client = mock_client_class.return_value
    client.call.side_effect = UnregisteredActionError("DescribeRegions")
    client.call_raw.return_value = {"regionInfo": {"item": [{"regionName": "us-east-1"}]}}

    result = mock_cli_runner.invoke(cli, ["call", "DescribeRegions"])

    assert result.exit_code == 0
    assert "No decoder registered for DescribeRegions" in result.output
    assert "us-east-1" in result.output
    client.call_raw.assert_called_once_with("DescribeRegions", [])


@patch("ec2query.cli.EC2Client")
def test_call_command_rejects_bad_pairs(mock_client_class, mock_cli_runner):
    result = mock_cli_runner.invoke(cli, ["call", "DeleteVpc", "vpc-1"])

    assert result.exit_code != 0
    mock_client_class.return_value.call.assert_not_called()
