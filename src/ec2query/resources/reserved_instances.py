"""Reserved instance actions."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..dispatch import Custom, FetchItems
from ..encoding import filter_param, list_param, require, single_param
from ..models import ReservedInstance, ReservedInstanceOffering
from ..utils import first


def _purchased_reservation(raw: Dict[str, Any], client: Any) -> Optional[ReservedInstance]:
    """Resolve the purchased reservation id into its full record (one extra call)."""
    reserved_instances_id = raw.get("reservedInstancesId")
    if not reserved_instances_id:
        return None
    return first(client.describe_reserved_instances(reserved_instances_id))


ACTIONS = (
    ("DescribeReservedInstances", FetchItems("reservedInstancesSet", ReservedInstance)),
    (
        "DescribeReservedInstancesOfferings",
        FetchItems("reservedInstancesOfferingsSet", ReservedInstanceOffering),
    ),
    ("PurchaseReservedInstancesOffering", Custom(_purchased_reservation)),
)


class ReservedInstanceMethods:
    """Reserved instance calls mixed into EC2Client."""

    def describe_reserved_instances(self, *reserved_ids: Any, **options: Any) -> List[ReservedInstance]:
        args = self._args("describe_reserved_instances", "reserved_instances_id", reserved_ids, options)
        params = (
            list_param("ReservedInstancesId", args)
            + single_param("OfferingType", args)
            + filter_param(args)
        )
        return self.call("DescribeReservedInstances", params)

    def describe_reserved_instances_offerings(
        self, *offering_ids: Any, **options: Any
    ) -> List[ReservedInstanceOffering]:
        """Describe offerings by id or by instance type, zone and platform.

        Args:
            *offering_ids: Offering ids, or a single filter dictionary
            **options: ``instance_type``, ``availability_zone`` (alias
                ``zone``), ``product_description``, ``instance_tenancy``,
                ``offering_type``, ``filter``
        """
        args = self._args(
            "describe_reserved_instances_offerings",
            "reserved_instances_offering_id",
            offering_ids,
            options,
        )
        params = (
            list_param("ReservedInstancesOfferingId", args)
            + single_param("InstanceType", args)
            + single_param("AvailabilityZone", args)
            + single_param("ProductDescription", args)
            + single_param("InstanceTenancy", args)
            + single_param("OfferingType", args)
            + filter_param(args)
        )
        return self.call("DescribeReservedInstancesOfferings", params)

    def purchase_reserved_instances_offering(self, **options: Any) -> Optional[ReservedInstance]:
        """Purchase an offering and return the resulting reservation.

        Args:
            **options: ``reserved_instances_offering_id`` (alias ``id``) and
                ``instance_count`` (alias ``count``), both required
        """
        args = self._args("purchase_reserved_instances_offering", None, (), options)
        require(
            args, "purchase_reserved_instances_offering",
            "reserved_instances_offering_id", "instance_count",
        )
        params = (
            single_param("ReservedInstancesOfferingId", args)
            + single_param("InstanceCount", args)
        )
        return self.call("PurchaseReservedInstancesOffering", params)
