"""Encode call arguments into EC2 Query API parameters.

Every function here is pure: it reads an argument dictionary keyed by
snake_case option names and returns a fresh, ordered list of
``(wire_key, wire_value)`` pairs. List indices on the wire are 1-based and
restart at 1 inside every composite entry.
"""
from __future__ import annotations

import base64
import re
import socket
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .exceptions import ArgumentError
from .utils import as_list, canonicalize

Parameter = Tuple[str, str]
Params = List[Parameter]

_BLOCK_DEVICE = re.compile(r"^([^=]+)=([^=]+)$")
_PORT_RANGE = re.compile(r"^\s*(-?\d+)\s*(?:\.\.|-)\s*(-?\d+)\s*$")
_PORT = re.compile(r"^\s*-?\d+\s*$")


def wire_value(value: Any) -> str:
    """Render a Python value the way the Query API expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def is_empty(value: Any) -> bool:
    """Absent for validation purposes: None, "" or an empty collection."""
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) == 0
    return False


def _lookup(name: str, args: Mapping[str, Any]) -> Any:
    return args.get(canonicalize(name))


# ------------------------------------------------------------------------
# Argument preparation
# ------------------------------------------------------------------------

def normalize_options(options: Mapping[str, Any]) -> Dict[str, Any]:
    """Canonicalize option names (``-ImageId`` -> ``image_id``)."""
    return {canonicalize(key): value for key, value in options.items()}


def collect_args(
    default_option: Optional[str],
    positional: Sequence[Any],
    options: Mapping[str, Any],
) -> Dict[str, Any]:
    """Build an argument dictionary from a method's positional and keyword input.

    A single positional dict is the filter map; other positional values are
    bound to ``default_option`` as a list. Keyword options win over
    positional ones.

    Args:
        default_option: Option receiving bare positional values
        positional: Positional arguments as passed to the method
        options: Keyword arguments as passed to the method

    Returns:
        Argument dictionary keyed by canonical option names
    """
    args: Dict[str, Any] = {}
    if len(positional) == 1 and isinstance(positional[0], Mapping):
        args["filter"] = dict(positional[0])
    elif positional:
        if default_option is None:
            raise TypeError("this operation takes no positional arguments")
        values: List[Any] = []
        for value in positional:
            values.extend(as_list(value))
        args[canonicalize(default_option)] = values
    args.update(normalize_options(options))
    return args


def resolve_aliases(args: Mapping[str, Any], aliases: Mapping[str, str]) -> Dict[str, Any]:
    """Fold alias options into their canonical names.

    The canonical name wins when both are supplied; the alias is dropped in
    either case so nothing is emitted twice.
    """
    resolved = dict(args)
    for alias, canonical in aliases.items():
        if alias not in resolved:
            continue
        value = resolved.pop(alias)
        if is_empty(resolved.get(canonical)) and not is_empty(value):
            resolved[canonical] = value
    return resolved


def require(args: Mapping[str, Any], operation: str, *names: str) -> None:
    """Fail with ArgumentError on the first missing or empty required option."""
    for name in names:
        if is_empty(args.get(canonicalize(name))):
            raise ArgumentError(canonicalize(name), operation)


# ------------------------------------------------------------------------
# Simple parameters
# ------------------------------------------------------------------------

def single_param(name: str, args: Mapping[str, Any]) -> Params:
    """``Name=value``; the first element is used when a list is given."""
    value = _lookup(name, args)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None or value == "":
        return []
    return [(name, wire_value(value))]


def list_param(name: str, args: Mapping[str, Any]) -> Params:
    """``Name.1=v1, Name.2=v2 ...``; a scalar is promoted to a one-element list."""
    values = [v for v in as_list(_lookup(name, args)) if v is not None]
    return [(f"{name}.{n}", wire_value(v)) for n, v in enumerate(values, 1)]


def param(name: str, args: Mapping[str, Any]) -> Params:
    """Type-driven encoding: lists are numbered, scalars are emitted as is."""
    value = _lookup(name, args)
    if isinstance(value, (list, tuple)):
        return list_param(name, args)
    if value is None or value == "":
        return []
    return [(name, wire_value(value))]


def value_param(name: str, args: Mapping[str, Any]) -> Params:
    """``Name.Value=value`` as used by the Modify*Attribute actions."""
    value = _lookup(name, args)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None or value == "":
        return []
    return [(f"{name}.Value", wire_value(value))]


def boolean_param(name: str, args: Mapping[str, Any]) -> Params:
    """``Name=true|false`` when the option was given at all."""
    key = canonicalize(name)
    if key not in args or args[key] is None:
        return []
    return [(name, "true" if args[key] else "false")]


def base64_param(name: str, args: Mapping[str, Any]) -> Params:
    """Base64-encode a string or bytes option (user data)."""
    value = _lookup(name, args)
    if value is None:
        return []
    raw = value.encode("utf-8") if isinstance(value, str) else bytes(value)
    return [(name, base64.b64encode(raw).decode("ascii"))]


# ------------------------------------------------------------------------
# Key/value parameters (filters, tags)
# ------------------------------------------------------------------------

def _pairs(entries: Any) -> List[Tuple[str, Any]]:
    if isinstance(entries, Mapping):
        return list(entries.items())
    pairs = []
    for entry in as_list(entries):
        name, sep, value = str(entry).partition("=")
        pairs.append((name.strip(), value.strip() if sep else None))
    return pairs


def key_value_param(
    prefix: str,
    key_name: str,
    value_name: str,
    entries: Any,
    index_values: bool = False,
    skip_none: bool = False,
) -> Params:
    """Encode a mapping (or ``"name=value"`` strings) as numbered key/value entries.

    Args:
        prefix: Wire prefix, e.g. ``Filter`` or ``Tag``
        key_name: Suffix for the entry name, e.g. ``Name`` or ``Key``
        value_name: Suffix for the entry value, e.g. ``Value``
        entries: Mapping of name to value (or list of values)
        index_values: Always number values (``Value.M``), even single ones;
            a bare name gets no value parameter at all
        skip_none: Omit the value parameter when the value is None

    Returns:
        Ordered parameter list
    """
    params: Params = []
    for n, (name, value) in enumerate(_pairs(entries), 1):
        params.append((f"{prefix}.{n}.{key_name}", wire_value(name)))
        if isinstance(value, (list, tuple)) or (index_values and value is not None):
            for m, item in enumerate(as_list(value), 1):
                params.append((f"{prefix}.{n}.{value_name}.{m}", wire_value(item)))
        elif value is None:
            if not (skip_none or index_values):
                params.append((f"{prefix}.{n}.{value_name}", ""))
        else:
            params.append((f"{prefix}.{n}.{value_name}", wire_value(value)))
    return params


def filter_param(args: Mapping[str, Any]) -> Params:
    """``Filter.N.Name`` / ``Filter.N.Value.M`` from the ``filter`` option."""
    entries = args.get("filter") or args.get("filters")
    if not entries:
        return []
    return key_value_param("Filter", "Name", "Value", entries, index_values=True)


def tag_create_param(args: Mapping[str, Any]) -> Params:
    """``Tag.N.Key`` / ``Tag.N.Value`` for CreateTags."""
    entries = args.get("tag") or args.get("tags")
    if not entries:
        return []
    return key_value_param("Tag", "Key", "Value", entries)


def tag_delete_param(args: Mapping[str, Any]) -> Params:
    """Like tag_create_param, but a key without a value deletes any value."""
    entries = args.get("tag") or args.get("tags")
    if not entries:
        return []
    if not isinstance(entries, Mapping):
        entries = {name: value for name, value in _pairs(entries)}
    return key_value_param("Tag", "Key", "Value", entries, skip_none=True)


def permission_param(base: str, operation: str, kind: str, values: Any) -> Params:
    """``LaunchPermission.Add.N.UserId`` style permission lists."""
    return [
        (f"{base}.{operation}.{n}.{kind}", wire_value(v))
        for n, v in enumerate(as_list(values), 1)
    ]


# ------------------------------------------------------------------------
# Composite parameters
# ------------------------------------------------------------------------

def _block_device_from_string(text: str) -> Dict[str, Any]:
    match = _BLOCK_DEVICE.match(text)
    if not match:
        raise ArgumentError(
            "block_device_mapping",
            "block_device_param",
            f"block device mapping must be in format /dev/sdXX=device-name, got '{text}'",
        )
    device_name, device = match.group(1), match.group(2)
    entry: Dict[str, Any] = {"device_name": device_name}
    if device == "none":
        entry["no_device"] = True
    elif re.match(r"^ephemeral\d+$", device):
        entry["virtual_name"] = device
    elif device.startswith("vol-"):
        volume_id, _, delete_on_termination = device.partition(":")
        entry["volume_id"] = volume_id
        entry["delete_on_termination"] = delete_on_termination or None
    else:
        fields = device.split(":") + [""] * 5
        snapshot_id, size, delete_on_termination, volume_type, iops = fields[:5]
        entry.update(
            snapshot_id=snapshot_id or None,
            volume_size=size or None,
            delete_on_termination=delete_on_termination or None,
            volume_type=volume_type or None,
            iops=iops or None,
        )
    return entry


def _termination_flag(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return wire_value(value)
    if value is None:
        return None
    text = str(value).lower()
    if text in ("true", "1"):
        return "true"
    if text in ("false", "0"):
        return "false"
    return None


def block_device_param(mappings: Any, prefix: str = "BlockDeviceMapping") -> Params:
    """Encode block device mappings.

    Each mapping is either a ``/dev/sdX=DEVICE`` string, where DEVICE is
    ``snap-id:size:delete_on_termination:volume_type:iops``, ``vol-id[:delete]``,
    ``ephemeralN`` or ``none``; or a dict with the snake_case field names.
    """
    params: Params = []
    entries = [m for m in as_list(mappings) if m is not None]
    for n, mapping in enumerate(entries, 1):
        entry = _block_device_from_string(mapping) if isinstance(mapping, str) \
            else normalize_options(mapping)
        key = f"{prefix}.{n}"
        params.append((f"{key}.DeviceName", wire_value(entry["device_name"])))
        if entry.get("no_device"):
            params.append((f"{key}.NoDevice", ""))
            continue
        if entry.get("virtual_name"):
            params.append((f"{key}.VirtualName", wire_value(entry["virtual_name"])))
            continue
        for field, suffix in (
            ("volume_id", "VolumeId"),
            ("snapshot_id", "SnapshotId"),
            ("volume_size", "VolumeSize"),
        ):
            if entry.get(field):
                params.append((f"{key}.Ebs.{suffix}", wire_value(entry[field])))
        delete_flag = _termination_flag(entry.get("delete_on_termination"))
        if delete_flag is not None:
            params.append((f"{key}.Ebs.DeleteOnTermination", delete_flag))
        for field, suffix in (("volume_type", "VolumeType"), ("iops", "Iops")):
            if entry.get(field):
                params.append((f"{key}.Ebs.{suffix}", wire_value(entry[field])))
    return params


def _resolve_port(port: Any, protocol: Any) -> Any:
    """Turn a service name such as ``ssh`` into its port number."""
    if port is None or isinstance(port, int) or _PORT.match(str(port)):
        return port
    name = str(port).strip()
    proto = str(protocol).lower()
    try:
        if proto in ("tcp", "udp"):
            return socket.getservbyname(name, proto)
        return socket.getservbyname(name)
    except OSError:
        raise ArgumentError(
            "port", "ip_permission_param", f"unknown port or service name '{port}'"
        ) from None


def _port_range(entry: Mapping[str, Any], protocol: Any) -> Tuple[Any, Any]:
    from_port, to_port = entry.get("from_port"), entry.get("to_port")
    port = entry.get("port")
    if port is not None and from_port is None:
        match = _PORT_RANGE.match(str(port))
        if match:
            from_port, to_port = match.group(1), match.group(2)
        else:
            from_port = to_port = port
    if to_port is None:
        to_port = from_port
    return _resolve_port(from_port, protocol), _resolve_port(to_port, protocol)


def _group_pair(group: Any) -> Dict[str, Any]:
    if isinstance(group, Mapping):
        return normalize_options(group)
    text = str(group)
    if text.startswith("sg-"):
        return {"group_id": text}
    user_id, sep, group_name = text.partition("/")
    if sep:
        return {"user_id": user_id, "group_name": group_name}
    return {"group_name": text}


def ip_permission_param(permissions: Any, prefix: str = "IpPermissions") -> Params:
    """Encode security group permission entries.

    Each entry is a mapping with ``protocol``/``ip_protocol``,
    ``from_port``/``to_port`` (or ``port`` as ``22``, ``"22..23"`` or a
    service name like ``"ssh"``), ``cidr``/``source_ip``/``ip_ranges`` and
    ``groups``. camelCase keys are accepted too.
    """
    params: Params = []
    for n, raw in enumerate(as_list(permissions), 1):
        entry = normalize_options(raw)
        key = f"{prefix}.{n}"
        protocol = entry.get("ip_protocol", entry.get("protocol"))
        if protocol is None:
            raise ArgumentError("protocol", "ip_permission_param")
        from_port, to_port = _port_range(entry, protocol)
        params.append((f"{key}.IpProtocol", wire_value(protocol)))
        if from_port is not None:
            params.append((f"{key}.FromPort", wire_value(from_port)))
        if to_port is not None:
            params.append((f"{key}.ToPort", wire_value(to_port)))

        cidrs: Iterable[Any] = as_list(
            entry.get("cidr", entry.get("source_ip", entry.get("ip_ranges")))
        )
        for m, cidr in enumerate(cidrs, 1):
            params.append((f"{key}.IpRanges.{m}.CidrIp", wire_value(cidr)))

        for m, group in enumerate(as_list(entry.get("groups")), 1):
            pair = _group_pair(group)
            if pair.get("group_id"):
                params.append((f"{key}.Groups.{m}.GroupId", wire_value(pair["group_id"])))
                continue
            if pair.get("user_id"):
                params.append((f"{key}.Groups.{m}.UserId", wire_value(pair["user_id"])))
            params.append((f"{key}.Groups.{m}.GroupName", wire_value(pair["group_name"])))
    return params


def dhcp_configuration_param(options: Mapping[str, Any]) -> Params:
    """``DhcpConfiguration.N.Key`` / ``.Value.M``; keys sorted, ``_`` becomes ``-``."""
    params: Params = []
    for n, name in enumerate(sorted(options), 1):
        key = name.lstrip("-").replace("_", "-")
        params.append((f"DhcpConfiguration.{n}.Key", key))
        for m, value in enumerate(as_list(options[name]), 1):
            params.append((f"DhcpConfiguration.{n}.Value.{m}", wire_value(value)))
    return params


_ACL_FIELDS = (
    ("NetworkAclId", "network_acl_id"),
    ("RuleNumber", "rule_number"),
    ("Protocol", "protocol"),
    ("RuleAction", "rule_action"),
    ("Egress", "egress"),
    ("CidrBlock", "cidr_block"),
    ("Icmp.Code", "icmp_code"),
    ("Icmp.Type", "icmp_type"),
    ("PortRange.From", "port_from"),
    ("PortRange.To", "port_to"),
)


def acl_entry_param(args: Mapping[str, Any]) -> Params:
    """Encode a network ACL entry (create or replace)."""
    params: Params = []
    for wire_name, option in _ACL_FIELDS:
        value = args.get(option)
        if value is None:
            continue
        params.append((wire_name, wire_value(value)))
    return params
