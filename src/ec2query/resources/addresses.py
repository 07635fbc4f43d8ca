"""Elastic IP address actions."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..dispatch import Boolean, Custom, FetchItems, FetchOne
from ..encoding import boolean_param, filter_param, is_empty, list_param, single_param
from ..exceptions import ArgumentError
from ..models import ElasticAddress
from ..utils import first


def _association_result(raw: Dict[str, Any], client: Any) -> Any:
    # VPC addresses return an association id, EC2-Classic only the flag
    return raw.get("associationId") or raw.get("return") == "true"


ACTIONS = (
    ("DescribeAddresses", FetchItems("addressesSet", ElasticAddress)),
    ("AllocateAddress", FetchOne(None, ElasticAddress)),
    ("ReleaseAddress", Boolean()),
    ("AssociateAddress", Custom(_association_result)),
    ("DisassociateAddress", Boolean()),
)


def _require_one(args: Dict[str, Any], operation: str, *names: str) -> None:
    if all(is_empty(args.get(name)) for name in names):
        raise ArgumentError(
            names[0], operation,
            f"{operation}(): one of {', '.join(names)} is required",
        )


class AddressMethods:
    """Elastic IP calls mixed into EC2Client."""

    def describe_addresses(self, *public_ips: Any, **options: Any) -> List[ElasticAddress]:
        args = self._args("describe_addresses", "public_ip", public_ips, options)
        params = (
            list_param("PublicIp", args)
            + list_param("AllocationId", args)
            + filter_param(args)
        )
        return self.call("DescribeAddresses", params)

    def describe_address(self, public_ip: str) -> Optional[ElasticAddress]:
        return first(self.describe_addresses(public_ip))

    def allocate_address(self, vpc: bool = False) -> ElasticAddress:
        """Allocate a new elastic IP; ``vpc=True`` allocates in the VPC domain."""
        params = [("Domain", "vpc")] if vpc else []
        return self.call("AllocateAddress", params)

    def release_address(self, **options: Any) -> bool:
        """Release an address by ``public_ip`` (classic) or ``allocation_id`` (VPC)."""
        args = self._args("release_address", None, (), options)
        _require_one(args, "release_address", "public_ip", "allocation_id")
        params = single_param("PublicIp", args) + single_param("AllocationId", args)
        return self.call("ReleaseAddress", params)

    def associate_address(self, **options: Any) -> Any:
        """Associate an address with an instance or network interface.

        Returns:
            The association id for VPC addresses, otherwise True on success
        """
        args = self._args("associate_address", None, (), options)
        _require_one(args, "associate_address", "public_ip", "allocation_id")
        _require_one(args, "associate_address", "instance_id", "network_interface_id")
        params = (
            single_param("PublicIp", args)
            + single_param("AllocationId", args)
            + single_param("InstanceId", args)
            + single_param("NetworkInterfaceId", args)
            + single_param("PrivateIpAddress", args)
            + boolean_param("AllowReassociation", args)
        )
        return self.call("AssociateAddress", params)

    def disassociate_address(self, **options: Any) -> bool:
        args = self._args("disassociate_address", None, (), options)
        _require_one(args, "disassociate_address", "public_ip", "association_id")
        params = single_param("PublicIp", args) + single_param("AssociationId", args)
        return self.call("DisassociateAddress", params)
