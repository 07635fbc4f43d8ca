"""Customer gateway actions (VPN endpoints on the customer side)."""
from __future__ import annotations

from typing import Any, List

from ..dispatch import Boolean, FetchItems, FetchOne
from ..encoding import filter_param, list_param, require, single_param
from ..models import CustomerGateway

DEFAULT_GATEWAY_TYPE = "ipsec.1"

ACTIONS = (
    ("DescribeCustomerGateways", FetchItems("customerGatewaySet", CustomerGateway)),
    ("CreateCustomerGateway", FetchOne("customerGateway", CustomerGateway)),
    ("DeleteCustomerGateway", Boolean()),
)


class CustomerGatewayMethods:
    """Customer gateway calls mixed into EC2Client."""

    def describe_customer_gateways(self, *gateway_ids: Any, **options: Any) -> List[CustomerGateway]:
        args = self._args("describe_customer_gateways", "customer_gateway_id", gateway_ids, options)
        return self.call(
            "DescribeCustomerGateways",
            list_param("CustomerGatewayId", args) + filter_param(args),
        )

    def create_customer_gateway(self, **options: Any) -> CustomerGateway:
        """Register the customer side of a VPN connection.

        Args:
            **options: ``ip_address`` (alias ``ip``) and ``bgp_asn`` are
                required; ``type`` defaults to ``ipsec.1``
        """
        args = self._args("create_customer_gateway", None, (), options)
        args.setdefault("type", DEFAULT_GATEWAY_TYPE)
        require(args, "create_customer_gateway", "ip_address", "bgp_asn")
        params = (
            single_param("Type", args)
            + single_param("IpAddress", args)
            + single_param("BgpAsn", args)
        )
        return self.call("CreateCustomerGateway", params)

    def delete_customer_gateway(self, customer_gateway_id: str) -> bool:
        return self.call("DeleteCustomerGateway", [("CustomerGatewayId", str(customer_gateway_id))])
