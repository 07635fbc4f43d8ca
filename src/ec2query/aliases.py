"""Option aliases, keyed by client method name.

Each entry maps an alias option name to its canonical name. Aliases are
folded in before validation; when a caller passes both, the canonical
option wins.
"""
from types import MappingProxyType
from typing import Mapping

_ROUTE = {"destination": "destination_cidr_block"}
_LAUNCH_PERMISSIONS = {
    "add_user": "launch_add_user",
    "remove_user": "launch_remove_user",
    "add_group": "launch_add_group",
    "remove_group": "launch_remove_group",
}

ALIASES: Mapping[str, Mapping[str, str]] = MappingProxyType({
    # images
    "create_image": {"block_devices": "block_device_mapping", "desc": "description"},
    "register_image": {
        "block_devices": "block_device_mapping",
        "location": "image_location",
        "desc": "description",
    },
    "copy_image": {
        "desc": "description",
        "region": "source_region",
        "image_id": "source_image_id",
    },
    "modify_image_attribute": _LAUNCH_PERMISSIONS,
    "describe_images": {"owners": "owner"},
    # security groups
    "create_security_group": {"name": "group_name", "description": "group_description"},
    "describe_security_groups": {"name": "group_name", "id": "group_id"},
    "delete_security_group": {"name": "group_name", "id": "group_id"},
    # addresses
    "associate_address": {"ip": "public_ip"},
    "disassociate_address": {"ip": "public_ip"},
    "release_address": {"ip": "public_ip"},
    # route tables
    "create_route": _ROUTE,
    "replace_route": _ROUTE,
    "delete_route": _ROUTE,
    # customer gateways
    "create_customer_gateway": {"ip": "ip_address", "asn": "bgp_asn"},
    # network ACLs
    "create_network_acl_entry": {"acl_id": "network_acl_id", "rule": "rule_number"},
    "replace_network_acl_entry": {"acl_id": "network_acl_id", "rule": "rule_number"},
    "delete_network_acl_entry": {"acl_id": "network_acl_id", "rule": "rule_number"},
    # reserved instances
    "describe_reserved_instances_offerings": {"zone": "availability_zone"},
    "purchase_reserved_instances_offering": {
        "id": "reserved_instances_offering_id",
        "count": "instance_count",
    },
    # tags
    "create_tags": {"resource_ids": "resource_id"},
    "delete_tags": {"resource_ids": "resource_id"},
    # subnets
    "create_subnet": {"zone": "availability_zone", "cidr": "cidr_block"},
    "create_vpc": {"cidr": "cidr_block", "tenancy": "instance_tenancy"},
})


def aliases_for(operation: str) -> Mapping[str, str]:
    """Alias table for a client method; empty when it has none."""
    return ALIASES.get(operation, {})
