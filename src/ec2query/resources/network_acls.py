"""Network ACL actions."""
from __future__ import annotations

from typing import Any, Dict, List

from ..dispatch import Boolean, FetchItems, FetchOne, FieldExtract
from ..encoding import acl_entry_param, filter_param, is_empty, list_param, require, single_param
from ..exceptions import ArgumentError
from ..models import NetworkAcl

ACTIONS = (
    ("DescribeNetworkAcls", FetchItems("networkAclSet", NetworkAcl)),
    ("CreateNetworkAcl", FetchOne("networkAcl", NetworkAcl)),
    ("DeleteNetworkAcl", Boolean()),
    ("CreateNetworkAclEntry", Boolean()),
    ("ReplaceNetworkAclEntry", Boolean()),
    ("DeleteNetworkAclEntry", Boolean()),
    ("ReplaceNetworkAclAssociation", FieldExtract("newAssociationId")),
)

PROTOCOL_NUMBERS = {"all": -1, "icmp": 1, "tcp": 6, "udp": 17}
RULE_ACTIONS = ("allow", "deny")


def _entry_args(args: Dict[str, Any], operation: str) -> Dict[str, Any]:
    """Validate a create/replace entry and fill in the implied fields."""
    require(args, operation, "network_acl_id", "rule_number", "protocol", "rule_action", "cidr_block")
    entry = dict(args)
    protocol = str(entry["protocol"]).lower()
    entry["protocol"] = PROTOCOL_NUMBERS.get(protocol, protocol)
    if str(entry["rule_action"]).lower() not in RULE_ACTIONS:
        raise ArgumentError(
            "rule_action", operation, f"{operation}(): rule_action must be 'allow' or 'deny'"
        )
    entry["egress"] = bool(entry.get("egress", False))

    protocol = str(entry["protocol"])
    if protocol == "1":
        require(entry, operation, "icmp_type", "icmp_code")
    elif protocol in ("6", "17"):
        require(entry, operation, "port_from")
        if is_empty(entry.get("port_to")):
            entry["port_to"] = entry["port_from"]
    return entry


class NetworkAclMethods:
    """Network ACL calls mixed into EC2Client."""

    def describe_network_acls(self, *network_acl_ids: Any, **options: Any) -> List[NetworkAcl]:
        args = self._args("describe_network_acls", "network_acl_id", network_acl_ids, options)
        return self.call(
            "DescribeNetworkAcls", list_param("NetworkAclId", args) + filter_param(args)
        )

    def create_network_acl(self, vpc_id: str) -> NetworkAcl:
        return self.call("CreateNetworkAcl", [("VpcId", str(vpc_id))])

    def delete_network_acl(self, network_acl_id: str) -> bool:
        return self.call("DeleteNetworkAcl", [("NetworkAclId", str(network_acl_id))])

    def create_network_acl_entry(self, **options: Any) -> bool:
        """Add a numbered rule to a network ACL.

        Args:
            **options: ``network_acl_id``, ``rule_number``, ``protocol``
                (number or ``tcp``/``udp``/``icmp``/``all``), ``rule_action``
                and ``cidr_block`` are required. ICMP rules need
                ``icmp_type`` and ``icmp_code``; TCP and UDP rules need
                ``port_from`` (``port_to`` defaults to it). ``egress``
                defaults to False.
        """
        args = self._args("create_network_acl_entry", None, (), options)
        entry = _entry_args(args, "create_network_acl_entry")
        return self.call("CreateNetworkAclEntry", acl_entry_param(entry))

    def replace_network_acl_entry(self, **options: Any) -> bool:
        args = self._args("replace_network_acl_entry", None, (), options)
        entry = _entry_args(args, "replace_network_acl_entry")
        return self.call("ReplaceNetworkAclEntry", acl_entry_param(entry))

    def delete_network_acl_entry(self, **options: Any) -> bool:
        args = self._args("delete_network_acl_entry", None, (), options)
        require(args, "delete_network_acl_entry", "network_acl_id", "rule_number")
        args["egress"] = bool(args.get("egress", False))
        params = (
            single_param("NetworkAclId", args)
            + single_param("RuleNumber", args)
            + single_param("Egress", args)
        )
        return self.call("DeleteNetworkAclEntry", params)

    def replace_network_acl_association(self, **options: Any) -> str:
        """Move a subnet to another ACL; returns the new association id."""
        args = self._args("replace_network_acl_association", None, (), options)
        require(args, "replace_network_acl_association", "association_id", "network_acl_id")
        params = single_param("AssociationId", args) + single_param("NetworkAclId", args)
        return self.call("ReplaceNetworkAclAssociation", params)
