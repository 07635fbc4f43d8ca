"""DHCP option set actions."""
from __future__ import annotations

from typing import Any, List

from ..dispatch import Boolean, FetchItems, FetchOne
from ..encoding import dhcp_configuration_param, filter_param, list_param, normalize_options
from ..exceptions import ArgumentError
from ..models import DhcpOptions

ACTIONS = (
    ("DescribeDhcpOptions", FetchItems("dhcpOptionsSet", DhcpOptions)),
    ("CreateDhcpOptions", FetchOne("dhcpOptions", DhcpOptions)),
    ("DeleteDhcpOptions", Boolean()),
    ("AssociateDhcpOptions", Boolean()),
)


class DhcpOptionsMethods:
    """DHCP option set calls mixed into EC2Client."""

    def describe_dhcp_options(self, *dhcp_options_ids: Any, **options: Any) -> List[DhcpOptions]:
        args = self._args("describe_dhcp_options", "dhcp_options_id", dhcp_options_ids, options)
        return self.call(
            "DescribeDhcpOptions", list_param("DhcpOptionsId", args) + filter_param(args)
        )

    def create_dhcp_options(self, **options: Any) -> DhcpOptions:
        """Create a DHCP option set.

        Keyword names are the DHCP option keys with ``_`` in place of ``-``,
        e.g. ``domain_name="example.com"``,
        ``domain_name_servers=["10.0.0.2", "10.0.0.3"]``.
        """
        if not options:
            raise ArgumentError(
                "dhcp_configuration", "create_dhcp_options",
                "create_dhcp_options(): at least one DHCP option is required",
            )
        params = dhcp_configuration_param(normalize_options(options))
        return self.call("CreateDhcpOptions", params)

    def delete_dhcp_options(self, dhcp_options_id: str) -> bool:
        return self.call("DeleteDhcpOptions", [("DhcpOptionsId", str(dhcp_options_id))])

    def associate_dhcp_options(self, dhcp_options_id: str, vpc_id: str) -> bool:
        """Attach an option set to a VPC; ``"default"`` restores the default set."""
        return self.call(
            "AssociateDhcpOptions",
            [("DhcpOptionsId", str(dhcp_options_id)), ("VpcId", str(vpc_id))],
        )
