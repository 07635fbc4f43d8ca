"""VPC route table actions."""
from __future__ import annotations

from typing import Any, Dict, List

from ..dispatch import Boolean, FetchItems, FetchOne, FieldExtract
from ..encoding import Params, filter_param, list_param, require, single_param
from ..exceptions import ArgumentError
from ..models import RouteTable

ACTIONS = (
    ("DescribeRouteTables", FetchItems("routeTableSet", RouteTable)),
    ("CreateRouteTable", FetchOne("routeTable", RouteTable)),
    ("DeleteRouteTable", Boolean()),
    ("AssociateRouteTable", FieldExtract("associationId")),
    ("DisassociateRouteTable", Boolean()),
    ("ReplaceRouteTableAssociation", FieldExtract("newAssociationId")),
    ("CreateRoute", Boolean()),
    ("ReplaceRoute", Boolean()),
    ("DeleteRoute", Boolean()),
)

_TARGET_PREFIXES = (
    ("igw-", "gateway_id"),
    ("vgw-", "gateway_id"),
    ("i-", "instance_id"),
    ("eni-", "network_interface_id"),
)
_TARGET_OPTIONS = ("gateway_id", "instance_id", "network_interface_id")


def _resolve_target(args: Dict[str, Any], operation: str) -> None:
    """Map a bare ``target`` id onto the option its prefix implies."""
    target = args.pop("target", None)
    if target is not None:
        for prefix, option in _TARGET_PREFIXES:
            if str(target).startswith(prefix):
                args.setdefault(option, str(target))
                break
        else:
            raise ArgumentError("target", operation, f"{operation}(): unknown route target '{target}'")
    if not any(args.get(option) for option in _TARGET_OPTIONS):
        raise ArgumentError(
            "target", operation,
            f"{operation}(): one of gateway_id, instance_id or network_interface_id is required",
        )


def _route_params(args: Dict[str, Any]) -> Params:
    return (
        single_param("RouteTableId", args)
        + single_param("DestinationCidrBlock", args)
        + single_param("GatewayId", args)
        + single_param("InstanceId", args)
        + single_param("NetworkInterfaceId", args)
    )


class RouteTableMethods:
    """Route table calls mixed into EC2Client."""

    def describe_route_tables(self, *route_table_ids: Any, **options: Any) -> List[RouteTable]:
        args = self._args("describe_route_tables", "route_table_id", route_table_ids, options)
        return self.call(
            "DescribeRouteTables", list_param("RouteTableId", args) + filter_param(args)
        )

    def create_route_table(self, vpc_id: str) -> RouteTable:
        return self.call("CreateRouteTable", [("VpcId", str(vpc_id))])

    def delete_route_table(self, route_table_id: str) -> bool:
        return self.call("DeleteRouteTable", [("RouteTableId", str(route_table_id))])

    def associate_route_table(self, **options: Any) -> str:
        """Associate a route table with a subnet; returns the association id."""
        args = self._args("associate_route_table", None, (), options)
        require(args, "associate_route_table", "route_table_id", "subnet_id")
        params = single_param("RouteTableId", args) + single_param("SubnetId", args)
        return self.call("AssociateRouteTable", params)

    def disassociate_route_table(self, association_id: str) -> bool:
        return self.call("DisassociateRouteTable", [("AssociationId", str(association_id))])

    def replace_route_table_association(self, **options: Any) -> str:
        args = self._args("replace_route_table_association", None, (), options)
        require(args, "replace_route_table_association", "association_id", "route_table_id")
        params = single_param("AssociationId", args) + single_param("RouteTableId", args)
        return self.call("ReplaceRouteTableAssociation", params)

    def create_route(self, **options: Any) -> bool:
        """Add a route.

        Args:
            **options: ``route_table_id`` and ``destination_cidr_block``
                (alias ``destination``) are required, plus a target given
                either explicitly (``gateway_id``, ``instance_id``,
                ``network_interface_id``) or as ``target``, whose id prefix
                picks the option
        """
        args = self._args("create_route", None, (), options)
        require(args, "create_route", "route_table_id", "destination_cidr_block")
        _resolve_target(args, "create_route")
        return self.call("CreateRoute", _route_params(args))

    def replace_route(self, **options: Any) -> bool:
        args = self._args("replace_route", None, (), options)
        require(args, "replace_route", "route_table_id", "destination_cidr_block")
        _resolve_target(args, "replace_route")
        return self.call("ReplaceRoute", _route_params(args))

    def delete_route(self, **options: Any) -> bool:
        args = self._args("delete_route", None, (), options)
        require(args, "delete_route", "route_table_id", "destination_cidr_block")
        params = single_param("RouteTableId", args) + single_param("DestinationCidrBlock", args)
        return self.call("DeleteRoute", params)
