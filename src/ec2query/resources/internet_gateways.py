"""Internet gateway actions."""
from __future__ import annotations

from typing import Any, List

from ..dispatch import Boolean, FetchItems, FetchOne
from ..encoding import filter_param, list_param
from ..models import InternetGateway

ACTIONS = (
    ("DescribeInternetGateways", FetchItems("internetGatewaySet", InternetGateway)),
    ("CreateInternetGateway", FetchOne("internetGateway", InternetGateway)),
    ("DeleteInternetGateway", Boolean()),
    ("AttachInternetGateway", Boolean()),
    ("DetachInternetGateway", Boolean()),
)


class InternetGatewayMethods:
    """Internet gateway calls mixed into EC2Client."""

    def describe_internet_gateways(self, *gateway_ids: Any, **options: Any) -> List[InternetGateway]:
        args = self._args("describe_internet_gateways", "internet_gateway_id", gateway_ids, options)
        return self.call(
            "DescribeInternetGateways",
            list_param("InternetGatewayId", args) + filter_param(args),
        )

    def create_internet_gateway(self) -> InternetGateway:
        return self.call("CreateInternetGateway")

    def delete_internet_gateway(self, internet_gateway_id: str) -> bool:
        return self.call("DeleteInternetGateway", [("InternetGatewayId", str(internet_gateway_id))])

    def attach_internet_gateway(self, internet_gateway_id: str, vpc_id: str) -> bool:
        return self.call(
            "AttachInternetGateway",
            [("InternetGatewayId", str(internet_gateway_id)), ("VpcId", str(vpc_id))],
        )

    def detach_internet_gateway(self, internet_gateway_id: str, vpc_id: str) -> bool:
        return self.call(
            "DetachInternetGateway",
            [("InternetGatewayId", str(internet_gateway_id)), ("VpcId", str(vpc_id))],
        )
