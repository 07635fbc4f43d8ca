"""Per-resource EC2 actions.

Every module exposes ``ACTIONS``, its ``(action, decode strategy)``
registrations, and a mixin class with one method per action. The client
composes all of them.
"""
from . import (
    addresses,
    customer_gateways,
    dhcp,
    images,
    internet_gateways,
    key_pairs,
    network_acls,
    reserved_instances,
    route_tables,
    security_groups,
    tags,
    vpcs,
)

MODULES = (
    images,
    addresses,
    security_groups,
    route_tables,
    internet_gateways,
    customer_gateways,
    dhcp,
    network_acls,
    reserved_instances,
    tags,
    vpcs,
    key_pairs,
)


def all_actions():
    """Yield every built-in registration, module by module."""
    for module in MODULES:
        yield from module.ACTIONS
