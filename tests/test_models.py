"""Tests for response record wrappers."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from ec2query.models import (
    DhcpOptions,
    ElasticAddress,
    Image,
    NetworkAcl,
    ReservedInstance,
    ReservedInstanceOffering,
    RouteTable,
    SecurityGroup,
)

SECURITY_GROUP = {
    "ownerId": "111122223333",
    "groupId": "sg-1",
    "groupName": "web",
    "groupDescription": "Web servers",
    "vpcId": "vpc-1",
    "ipPermissions": {
        "item": [
            {
                "ipProtocol": "tcp",
                "fromPort": "22",
                "toPort": "22",
                "groups": None,
                "ipRanges": {"item": [{"cidrIp": "10.0.0.0/8"}]},
            },
            {
                "ipProtocol": "tcp",
                "fromPort": "5432",
                "toPort": "5433",
                "groups": {"item": [{"userId": "111122223333", "groupId": "sg-2"}]},
                "ipRanges": None,
            },
        ]
    },
    "ipPermissionsEgress": None,
    "tagSet": {"item": [{"key": "Name", "value": "web"}]},
}


class TestEC2Object:
    def test_snake_case_fields(self):
        image = Image({"imageId": "ami-1", "imageState": "available"})

        assert image.image_id == "ami-1"
        assert image.image_state == "available"
        assert image.primary_id == "ami-1"
        assert str(image) == "ami-1"

    def test_known_field_missing_from_payload(self):
        assert Image({"imageId": "ami-1"}).description is None

    def test_unknown_field(self):
        with pytest.raises(AttributeError):
            Image({"imageId": "ami-1"}).flavour

    def test_tags(self):
        group = SecurityGroup(SECURITY_GROUP)

        assert group.tags == {"Name": "web"}
        assert Image({}).tags == {}

    def test_equality(self):
        assert Image({"imageId": "ami-1"}) == Image({"imageId": "ami-1"})
        assert Image({"imageId": "ami-1"}) != Image({"imageId": "ami-2"})
        assert Image({"imageId": "ami-1"}) != ElasticAddress({"imageId": "ami-1"})

    def test_from_payload_keeps_client(self):
        client = object()

        assert Image.from_payload({"imageId": "ami-1"}, client).client is client


class TestSecurityGroup:
    def test_permissions(self):
        group = SecurityGroup(SECURITY_GROUP)

        ssh, postgres = group.ip_permissions
        assert ssh.ip_ranges == ["10.0.0.0/8"]
        assert str(ssh) == "tcp(22) FROM 10.0.0.0/8"
        assert str(postgres) == "tcp(5432..5433) FROM sg-2"
        assert group.ip_permissions_egress == []

    def test_permission_as_rule(self):
        rule = SecurityGroup(SECURITY_GROUP).ip_permissions[1].as_rule()

        assert rule["groups"] == [{"group_id": "sg-2", "user_id": "111122223333"}]
        assert rule["cidr"] == []

    def test_staged_rules_are_sent_by_update(self):
        client = MagicMock()
        group = SecurityGroup(SECURITY_GROUP, client)

        group.authorize_incoming(protocol="tcp", port=80, cidr="0.0.0.0/0")
        group.update()

        client.update_security_group.assert_called_once_with(group)
        assert group.pending == {
            ("Authorize", "Ingress"): [{"protocol": "tcp", "port": 80, "cidr": "0.0.0.0/0"}]
        }


class TestOtherModels:
    def test_route_table(self):
        table = RouteTable({
            "routeTableId": "rtb-1",
            "routeSet": {"item": [
                {"destinationCidrBlock": "10.0.0.0/16", "gatewayId": "local", "state": "active"},
                {"destinationCidrBlock": "0.0.0.0/0", "instanceId": "i-1"},
            ]},
            "associationSet": {"item": [{"routeTableAssociationId": "rtbassoc-1", "main": "true"}]},
        })

        assert [route.target for route in table.routes] == ["local", "i-1"]
        assert table.associations[0].is_main

    def test_dhcp_options(self):
        options = DhcpOptions({
            "dhcpOptionsId": "dopt-1",
            "dhcpConfigurationSet": {"item": [
                {"key": "domain-name", "valueSet": {"item": [{"value": "example.com"}]}},
                {"key": "domain-name-servers", "valueSet": {"item": [
                    {"value": "10.0.0.2"}, {"value": "10.0.0.3"},
                ]}},
            ]},
        })

        assert options.options() == ["domain-name", "domain-name-servers"]
        assert options.option("domain-name-servers") == ["10.0.0.2", "10.0.0.3"]
        assert options.as_string() == "domain-name = example.com; domain-name-servers = 10.0.0.2,10.0.0.3"

    def test_network_acl_entries(self):
        acl = NetworkAcl({
            "networkAclId": "acl-1",
            "default": "true",
            "entrySet": {"item": [{
                "ruleNumber": "100", "protocol": "6", "ruleAction": "allow",
                "egress": "false", "cidrBlock": "0.0.0.0/0",
                "portRange": {"from": "22", "to": "22"},
            }]},
        })

        entry = acl.entries[0]
        assert acl.is_default
        assert not entry.is_egress
        assert (entry.port_from, entry.port_to) == ("22", "22")

    def test_image_make_public(self):
        client = MagicMock()
        client.modify_image_attribute.return_value = True
        image = Image({"imageId": "ami-1", "isPublic": "false"}, client)

        assert image.make_public() is True

        client.modify_image_attribute.assert_called_once_with("ami-1", launch_add_group="all")
        assert image.is_public

    def test_offering_purchase_returns_the_reservation(self):
        client = MagicMock()
        reservation = ReservedInstance({"reservedInstancesId": "ri-1"})
        client.purchase_reserved_instances_offering.return_value = reservation
        offering = ReservedInstanceOffering({"reservedInstancesOfferingId": "offer-1"}, client)

        assert offering.purchase(2) is reservation
        client.purchase_reserved_instances_offering.assert_called_once_with(
            reserved_instances_offering_id="offer-1", instance_count=2
        )
