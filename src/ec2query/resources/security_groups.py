"""Security group actions."""
from __future__ import annotations

from typing import Any, List, Optional

from ..dispatch import Boolean, FetchItems, FieldExtract
from ..encoding import Params, filter_param, ip_permission_param, list_param, require, single_param
from ..exceptions import ArgumentError
from ..models import SecurityGroup
from ..utils import as_list, first

ACTIONS = (
    ("DescribeSecurityGroups", FetchItems("securityGroupInfo", SecurityGroup)),
    ("CreateSecurityGroup", FieldExtract("groupId")),
    ("DeleteSecurityGroup", Boolean()),
    ("AuthorizeSecurityGroupIngress", Boolean()),
    ("AuthorizeSecurityGroupEgress", Boolean()),
    ("RevokeSecurityGroupIngress", Boolean()),
    ("RevokeSecurityGroupEgress", Boolean()),
)


def _group_param(group: Any, egress: bool = False) -> Params:
    """``GroupId`` for ids and SecurityGroup objects, ``GroupName`` otherwise."""
    if isinstance(group, SecurityGroup):
        return [("GroupId", group.group_id)]
    text = str(group)
    if text.startswith("sg-"):
        return [("GroupId", text)]
    if egress:
        raise ArgumentError("group_id", "security group egress", "egress rules need a group id")
    return [("GroupName", text)]


class SecurityGroupMethods:
    """Security group calls mixed into EC2Client."""

    def describe_security_groups(self, *groups: Any, **options: Any) -> List[SecurityGroup]:
        """Describe security groups.

        Positional values starting with ``sg-`` are group ids, anything else
        is treated as a group name.
        """
        args = self._args("describe_security_groups", "group_id", groups, options)
        ids, names = [], as_list(args.get("group_name"))
        for value in as_list(args.get("group_id")):
            (ids if str(value).startswith("sg-") else names).append(value)
        args["group_id"], args["group_name"] = ids, names
        params = list_param("GroupId", args) + list_param("GroupName", args) + filter_param(args)
        return self.call("DescribeSecurityGroups", params)

    def describe_security_group(self, group: str) -> Optional[SecurityGroup]:
        return first(self.describe_security_groups(group))

    def create_security_group(self, wait: bool = True, **options: Any) -> Any:
        """Create a security group and wait for it to become describable.

        Args:
            wait: Block until visible; False returns a PollHandle instead
            **options: ``group_name`` (alias ``name``) and
                ``group_description`` (alias ``description``) are required;
                ``vpc_id`` is optional

        Returns:
            The SecurityGroup, or a PollHandle when ``wait`` is False
        """
        args = self._args("create_security_group", None, (), options)
        require(args, "create_security_group", "group_name", "group_description")
        params = (
            single_param("GroupName", args)
            + single_param("GroupDescription", args)
            + single_param("VpcId", args)
        )
        group_id = self.call("CreateSecurityGroup", params)
        return self._await(group_id, self._visible(self.describe_security_group), wait)

    def delete_security_group(self, group: Any = None, **options: Any) -> bool:
        args = self._args("delete_security_group", None, (), options)
        group = group or args.get("group_id") or args.get("group_name")
        if not group:
            raise ArgumentError("group_id", "delete_security_group")
        return self.call("DeleteSecurityGroup", _group_param(group))

    def _permission_call(self, action: str, group: Any, permissions: Any, egress: bool) -> bool:
        if not permissions:
            raise ArgumentError("ip_permissions", action)
        params = _group_param(group, egress) + ip_permission_param(permissions)
        return self.call(action, params)

    def authorize_security_group_ingress(self, group: Any, *permissions: Any) -> bool:
        return self._permission_call("AuthorizeSecurityGroupIngress", group, list(permissions), False)

    def authorize_security_group_egress(self, group: Any, *permissions: Any) -> bool:
        return self._permission_call("AuthorizeSecurityGroupEgress", group, list(permissions), True)

    def revoke_security_group_ingress(self, group: Any, *permissions: Any) -> bool:
        return self._permission_call("RevokeSecurityGroupIngress", group, list(permissions), False)

    def revoke_security_group_egress(self, group: Any, *permissions: Any) -> bool:
        return self._permission_call("RevokeSecurityGroupEgress", group, list(permissions), True)

    def update_security_group(self, group: SecurityGroup) -> bool:
        """Send every rule staged on ``group`` and refresh it from EC2.

        Returns:
            True if every call succeeded
        """
        ok = True
        for (action, direction), rules in sorted(group.pending.items()):
            ok = self._permission_call(
                f"{action}SecurityGroup{direction}", group, rules, direction == "Egress"
            ) and ok
            # sent rules are unstaged one call at a time
            del group.pending[(action, direction)]
        refreshed = self.describe_security_group(group.group_id)
        if refreshed is not None:
            group.payload = refreshed.payload
        return ok
