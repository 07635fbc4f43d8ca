"""Typed wrappers around raw EC2 response records.

Every class satisfies the decode contract used by the dispatcher:
``Cls.from_payload(payload, client)``. Fields are read with snake_case
attribute names mapped onto the camelCase keys of the response, so
``image.image_state`` returns ``payload["imageState"]``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from .utils import get_items, tags_to_dict, uncanonicalize


class EC2Object:
    """Base class for response records."""

    FIELDS: Tuple[str, ...] = ()
    ID_FIELD: Optional[str] = None

    def __init__(self, payload: Optional[Dict[str, Any]] = None, client: Any = None) -> None:
        self.payload = dict(payload or {})
        self.client = client

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]], client: Any = None) -> "EC2Object":
        return cls(payload, client)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        payload = self.__dict__.get("payload", {})
        for key in (name, uncanonicalize(name)):
            if key in payload or key in self.FIELDS:
                return payload.get(key)
        raise AttributeError(f"{type(self).__name__} has no field '{name}'")

    @property
    def primary_id(self) -> Optional[str]:
        return self.payload.get(self.ID_FIELD) if self.ID_FIELD else None

    @property
    def tags(self) -> Dict[str, str]:
        return tags_to_dict(self.payload.get("tagSet"))

    def __str__(self) -> str:
        return str(self.primary_id or "")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.primary_id}>"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, EC2Object):
            return NotImplemented
        return type(self) is type(other) and self.payload == other.payload

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.primary_id))


class Image(EC2Object):
    FIELDS = (
        "imageId", "imageLocation", "imageState", "imageOwnerId", "isPublic",
        "productCodes", "architecture", "imageType", "kernelId", "ramdiskId",
        "platform", "stateReason", "imageOwnerAlias", "name", "description",
        "rootDeviceType", "rootDeviceName", "blockDeviceMapping",
        "virtualizationType", "tagSet", "hypervisor",
    )
    ID_FIELD = "imageId"

    @property
    def is_public(self) -> bool:
        return self.payload.get("isPublic") == "true"

    @property
    def product_codes(self) -> List[str]:
        return [item.get("productCode") for item in get_items(self.payload.get("productCodes"))]

    @property
    def block_devices(self) -> List[Dict[str, Any]]:
        return get_items(self.payload.get("blockDeviceMapping"))

    def make_public(self, public: bool = True) -> bool:
        option = "launch_add_group" if public else "launch_remove_group"
        result = self.client.modify_image_attribute(self.image_id, **{option: "all"})
        if result:
            self.payload["isPublic"] = "true" if public else "false"
        return result

    def deregister(self) -> bool:
        return self.client.deregister_image(self.image_id)


class IpPermission(EC2Object):
    FIELDS = ("ipProtocol", "fromPort", "toPort", "groups", "ipRanges")

    @property
    def ip_ranges(self) -> List[str]:
        return [item.get("cidrIp") for item in get_items(self.payload.get("ipRanges"))]

    @property
    def groups(self) -> List[Dict[str, Any]]:
        return get_items(self.payload.get("groups"))

    def as_rule(self) -> Dict[str, Any]:
        """Rule dictionary accepted by ``encoding.ip_permission_param``."""
        return {
            "ip_protocol": self.ip_protocol,
            "from_port": self.from_port,
            "to_port": self.to_port,
            "cidr": self.ip_ranges,
            "groups": [
                {k: v for k, v in (
                    ("group_id", g.get("groupId")),
                    ("user_id", g.get("userId")),
                    ("group_name", g.get("groupName")),
                ) if v}
                for g in self.groups
            ],
        }

    def __str__(self) -> str:
        ports = self.from_port if self.from_port == self.to_port else f"{self.from_port}..{self.to_port}"
        sources = ",".join(self.ip_ranges) or ",".join(
            g.get("groupId") or g.get("groupName") or "" for g in self.groups
        )
        return f"{self.ip_protocol}({ports}) FROM {sources}"


class SecurityGroup(EC2Object):
    """Security group with locally staged rule changes.

    ``authorize_incoming()`` and friends only stage a rule; ``update()``
    sends every staged rule in one call per action and direction.
    """

    FIELDS = (
        "ownerId", "groupId", "groupName", "groupDescription", "vpcId",
        "ipPermissions", "ipPermissionsEgress", "tagSet",
    )
    ID_FIELD = "groupId"

    def __init__(self, payload: Optional[Dict[str, Any]] = None, client: Any = None) -> None:
        super().__init__(payload, client)
        self.pending: Dict[Tuple[str, str], List[Dict[str, Any]]] = {}

    @property
    def ip_permissions(self) -> List[IpPermission]:
        return [IpPermission(p, self.client) for p in get_items(self.payload.get("ipPermissions"))]

    @property
    def ip_permissions_egress(self) -> List[IpPermission]:
        return [
            IpPermission(p, self.client)
            for p in get_items(self.payload.get("ipPermissionsEgress"))
        ]

    def _stage(self, action: str, direction: str, rule: Dict[str, Any]) -> None:
        self.pending.setdefault((action, direction), []).append(rule)

    def authorize_incoming(self, **rule: Any) -> None:
        self._stage("Authorize", "Ingress", rule)

    def authorize_outgoing(self, **rule: Any) -> None:
        self._stage("Authorize", "Egress", rule)

    def revoke_incoming(self, **rule: Any) -> None:
        self._stage("Revoke", "Ingress", rule)

    def revoke_outgoing(self, **rule: Any) -> None:
        self._stage("Revoke", "Egress", rule)

    def update(self) -> bool:
        return self.client.update_security_group(self)


class ElasticAddress(EC2Object):
    FIELDS = ("publicIp", "domain", "allocationId", "instanceId", "associationId")
    ID_FIELD = "publicIp"

    @property
    def is_vpc(self) -> bool:
        return self.payload.get("domain") == "vpc"


class Route(EC2Object):
    FIELDS = (
        "destinationCidrBlock", "gatewayId", "instanceId", "instanceOwnerId",
        "networkInterfaceId", "state",
    )
    ID_FIELD = "destinationCidrBlock"

    @property
    def target(self) -> Optional[str]:
        return self.gateway_id or self.instance_id or self.network_interface_id


class RouteTableAssociation(EC2Object):
    FIELDS = ("routeTableAssociationId", "routeTableId", "subnetId", "main")
    ID_FIELD = "routeTableAssociationId"

    @property
    def is_main(self) -> bool:
        return self.payload.get("main") == "true"


class RouteTable(EC2Object):
    FIELDS = ("routeTableId", "vpcId", "routeSet", "associationSet", "tagSet")
    ID_FIELD = "routeTableId"

    @property
    def routes(self) -> List[Route]:
        return [Route(r, self.client) for r in get_items(self.payload.get("routeSet"))]

    @property
    def associations(self) -> List[RouteTableAssociation]:
        return [
            RouteTableAssociation(a, self.client)
            for a in get_items(self.payload.get("associationSet"))
        ]


class InternetGateway(EC2Object):
    FIELDS = ("internetGatewayId", "attachmentSet", "tagSet")
    ID_FIELD = "internetGatewayId"

    @property
    def attachments(self) -> List[Dict[str, Any]]:
        return get_items(self.payload.get("attachmentSet"))

    def attach(self, vpc_id: str) -> bool:
        return self.client.attach_internet_gateway(self.internet_gateway_id, vpc_id)

    def detach(self, vpc_id: str) -> bool:
        return self.client.detach_internet_gateway(self.internet_gateway_id, vpc_id)


class CustomerGateway(EC2Object):
    FIELDS = ("customerGatewayId", "state", "type", "ipAddress", "bgpAsn", "tagSet")
    ID_FIELD = "customerGatewayId"


class DhcpOptions(EC2Object):
    FIELDS = ("dhcpOptionsId", "dhcpConfigurationSet", "tagSet")
    ID_FIELD = "dhcpOptionsId"

    def options(self) -> List[str]:
        return [item.get("key") for item in get_items(self.payload.get("dhcpConfigurationSet"))]

    def option(self, key: str) -> List[str]:
        values: List[str] = []
        for item in get_items(self.payload.get("dhcpConfigurationSet")):
            if item.get("key") == key:
                values.extend(v.get("value") for v in get_items(item.get("valueSet")))
        return values

    def as_string(self) -> str:
        return "; ".join(f"{key} = {','.join(self.option(key))}" for key in self.options())


class NetworkAclEntry(EC2Object):
    FIELDS = (
        "ruleNumber", "protocol", "ruleAction", "egress", "cidrBlock",
        "icmpTypeCode", "portRange",
    )
    ID_FIELD = "ruleNumber"

    @property
    def is_egress(self) -> bool:
        return self.payload.get("egress") == "true"

    @property
    def port_from(self) -> Optional[str]:
        return (self.payload.get("portRange") or {}).get("from")

    @property
    def port_to(self) -> Optional[str]:
        return (self.payload.get("portRange") or {}).get("to")


class NetworkAcl(EC2Object):
    FIELDS = ("networkAclId", "vpcId", "default", "entrySet", "associationSet", "tagSet")
    ID_FIELD = "networkAclId"

    @property
    def is_default(self) -> bool:
        return self.payload.get("default") == "true"

    @property
    def entries(self) -> List[NetworkAclEntry]:
        return [NetworkAclEntry(e, self.client) for e in get_items(self.payload.get("entrySet"))]

    @property
    def associations(self) -> List[Dict[str, Any]]:
        return get_items(self.payload.get("associationSet"))


class ReservedInstance(EC2Object):
    FIELDS = (
        "reservedInstancesId", "instanceType", "availabilityZone", "start",
        "duration", "fixedPrice", "usagePrice", "instanceCount",
        "productDescription", "state", "tagSet", "instanceTenancy", "currencyCode",
    )
    ID_FIELD = "reservedInstancesId"


class ReservedInstanceOffering(EC2Object):
    FIELDS = (
        "reservedInstancesOfferingId", "instanceType", "availabilityZone",
        "duration", "fixedPrice", "usagePrice", "productDescription",
        "instanceTenancy", "currencyCode", "offeringType",
    )
    ID_FIELD = "reservedInstancesOfferingId"

    def purchase(self, count: int = 1) -> Optional[ReservedInstance]:
        return self.client.purchase_reserved_instances_offering(
            reserved_instances_offering_id=self.primary_id, instance_count=count
        )


class Tag(EC2Object):
    FIELDS = ("resourceId", "resourceType", "key", "value")
    ID_FIELD = "key"


class Vpc(EC2Object):
    FIELDS = ("vpcId", "state", "cidrBlock", "dhcpOptionsId", "instanceTenancy", "isDefault", "tagSet")
    ID_FIELD = "vpcId"


class Subnet(EC2Object):
    FIELDS = (
        "subnetId", "state", "vpcId", "cidrBlock", "availableIpAddressCount",
        "availabilityZone", "defaultForAz", "mapPublicIpOnLaunch", "tagSet",
    )
    ID_FIELD = "subnetId"


class KeyPair(EC2Object):
    FIELDS = ("keyName", "keyFingerprint", "keyMaterial")
    ID_FIELD = "keyName"
