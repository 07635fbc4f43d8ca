"""VPC and subnet actions."""
from __future__ import annotations

from typing import Any, List

from ..dispatch import Boolean, FetchItems, FetchOne
from ..encoding import filter_param, list_param, require, single_param
from ..models import Subnet, Vpc

ACTIONS = (
    ("DescribeVpcs", FetchItems("vpcSet", Vpc)),
    ("CreateVpc", FetchOne("vpc", Vpc)),
    ("DeleteVpc", Boolean()),
    ("DescribeSubnets", FetchItems("subnetSet", Subnet)),
    ("CreateSubnet", FetchOne("subnet", Subnet)),
    ("DeleteSubnet", Boolean()),
)


class VpcMethods:
    """VPC and subnet calls mixed into EC2Client."""

    def describe_vpcs(self, *vpc_ids: Any, **options: Any) -> List[Vpc]:
        args = self._args("describe_vpcs", "vpc_id", vpc_ids, options)
        return self.call("DescribeVpcs", list_param("VpcId", args) + filter_param(args))

    def create_vpc(self, **options: Any) -> Vpc:
        args = self._args("create_vpc", None, (), options)
        require(args, "create_vpc", "cidr_block")
        params = single_param("CidrBlock", args) + single_param("InstanceTenancy", args)
        return self.call("CreateVpc", params)

    def delete_vpc(self, vpc_id: str) -> bool:
        return self.call("DeleteVpc", [("VpcId", str(vpc_id))])

    def describe_subnets(self, *subnet_ids: Any, **options: Any) -> List[Subnet]:
        args = self._args("describe_subnets", "subnet_id", subnet_ids, options)
        return self.call("DescribeSubnets", list_param("SubnetId", args) + filter_param(args))

    def create_subnet(self, **options: Any) -> Subnet:
        """Create a subnet in a VPC.

        Args:
            **options: ``vpc_id`` and ``cidr_block`` (alias ``cidr``) are
                required; ``availability_zone`` (alias ``zone``) is optional
        """
        args = self._args("create_subnet", None, (), options)
        require(args, "create_subnet", "vpc_id", "cidr_block")
        params = (
            single_param("VpcId", args)
            + single_param("CidrBlock", args)
            + single_param("AvailabilityZone", args)
        )
        return self.call("CreateSubnet", params)

    def delete_subnet(self, subnet_id: str) -> bool:
        return self.call("DeleteSubnet", [("SubnetId", str(subnet_id))])
