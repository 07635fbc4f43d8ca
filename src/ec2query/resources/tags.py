"""Resource tag actions."""
from __future__ import annotations

from typing import Any, List

from ..dispatch import Boolean, FetchItems
from ..encoding import filter_param, list_param, require, tag_create_param, tag_delete_param
from ..models import Tag

ACTIONS = (
    ("DescribeTags", FetchItems("tagSet", Tag)),
    ("CreateTags", Boolean()),
    ("DeleteTags", Boolean()),
)


class TagMethods:
    """Tag calls mixed into EC2Client."""

    def describe_tags(self, *filters: Any, **options: Any) -> List[Tag]:
        """Describe tags, usually with a filter such as ``{"resource-id": "i-1"}``."""
        args = self._args("describe_tags", None, filters, options)
        return self.call("DescribeTags", filter_param(args))

    def create_tags(self, **options: Any) -> bool:
        """Tag one or more resources.

        Args:
            **options: ``resource_id`` (id or list of ids) and ``tag``, a
                mapping of key to value; both required
        """
        args = self._args("create_tags", None, (), options)
        require(args, "create_tags", "resource_id", "tag")
        return self.call("CreateTags", list_param("ResourceId", args) + tag_create_param(args))

    def delete_tags(self, **options: Any) -> bool:
        """Remove tags; a key mapped to None removes it whatever its value."""
        args = self._args("delete_tags", None, (), options)
        require(args, "delete_tags", "resource_id", "tag")
        return self.call("DeleteTags", list_param("ResourceId", args) + tag_delete_param(args))
