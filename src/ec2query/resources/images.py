"""AMI actions."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..dispatch import Boolean, Custom, FetchItems, FieldExtract
from ..encoding import (
    block_device_param,
    boolean_param,
    filter_param,
    is_empty,
    list_param,
    param,
    permission_param,
    require,
    single_param,
    value_param,
)
from ..exceptions import ArgumentError
from ..models import Image
from ..utils import first, get_items

_ATTRIBUTE_META = ("requestId", "imageId")


def _image_attribute(raw: Dict[str, Any], client: Any) -> Any:
    for key, value in raw.items():
        if key in _ATTRIBUTE_META:
            continue
        if isinstance(value, dict) and "item" in value:
            return get_items(value)
        if isinstance(value, dict) and "value" in value:
            return value["value"]
        return value
    return None


ACTIONS = (
    ("DescribeImages", FetchItems("imagesSet", Image)),
    ("CreateImage", FieldExtract("imageId")),
    ("CopyImage", FieldExtract("imageId")),
    ("RegisterImage", FieldExtract("imageId")),
    ("DeregisterImage", Boolean()),
    ("ModifyImageAttribute", Boolean()),
    ("ResetImageAttribute", Boolean()),
    ("DescribeImageAttribute", Custom(_image_attribute)),
)


class ImageMethods:
    """Image (AMI) calls mixed into EC2Client."""

    def describe_images(self, *image_ids: Any, **options: Any) -> List[Image]:
        """Describe images by id, owner, executable-by user or filter.

        Args:
            *image_ids: Image ids, or a single filter dictionary
            **options: ``image_id``, ``owner``, ``executable_by``, ``filter``

        Returns:
            List of Image objects (empty when nothing matches)
        """
        args = self._args("describe_images", "image_id", image_ids, options)
        params = (
            list_param("ImageId", args)
            + param("Owner", args)
            + list_param("ExecutableBy", args)
            + filter_param(args)
        )
        return self.call("DescribeImages", params)

    def describe_image(self, image_id: str) -> Optional[Image]:
        return first(self.describe_images(image_id))

    def create_image(self, wait: bool = True, **options: Any) -> Any:
        """Create an EBS-backed image from an instance.

        The new image id is not immediately describable, so the result is
        obtained by polling ``describe_image``.

        Args:
            wait: Block until the image is visible; False returns a PollHandle
            **options: ``instance_id`` and ``name`` (required), ``description``,
                ``no_reboot``, ``block_device_mapping``

        Returns:
            The Image, or a PollHandle when ``wait`` is False
        """
        args = self._args("create_image", None, (), options)
        require(args, "create_image", "instance_id", "name")
        params = (
            single_param("InstanceId", args)
            + single_param("Name", args)
            + single_param("Description", args)
            + boolean_param("NoReboot", args)
            + block_device_param(args.get("block_device_mapping"))
        )
        image_id = self.call("CreateImage", params)
        return self._await(image_id, self._visible(self.describe_image), wait)

    def copy_image(self, wait: bool = True, **options: Any) -> Any:
        """Copy an image from another region into this one.

        Args:
            wait: Block until the copy is visible; False returns a PollHandle
            **options: ``source_region`` and ``source_image_id`` (required),
                ``name``, ``description``, ``client_token``
        """
        args = self._args("copy_image", None, (), options)
        require(args, "copy_image", "source_region", "source_image_id")
        params = (
            single_param("SourceRegion", args)
            + single_param("SourceImageId", args)
            + single_param("Name", args)
            + single_param("Description", args)
            + single_param("ClientToken", args)
        )
        image_id = self.call("CopyImage", params)
        return self._await(image_id, self._visible(self.describe_image), wait)

    def register_image(self, **options: Any) -> str:
        """Register an AMI from a manifest location or a root snapshot.

        Either ``image_location`` or both ``root_device_name`` and
        ``block_device_mapping`` must be given.

        Returns:
            The new image id
        """
        args = self._args("register_image", None, (), options)
        require(args, "register_image", "name")
        if is_empty(args.get("image_location")):
            if is_empty(args.get("root_device_name")) or is_empty(args.get("block_device_mapping")):
                raise ArgumentError(
                    "image_location",
                    "register_image",
                    "register_image(): image_location or root_device_name "
                    "and block_device_mapping are required",
                )
        params = (
            single_param("ImageLocation", args)
            + single_param("Name", args)
            + single_param("Description", args)
            + single_param("Architecture", args)
            + single_param("KernelId", args)
            + single_param("RamdiskId", args)
            + single_param("RootDeviceName", args)
            + single_param("VirtualizationType", args)
            + single_param("SriovNetSupport", args)
            + block_device_param(args.get("block_device_mapping"))
        )
        return self.call("RegisterImage", params)

    def deregister_image(self, image_id: str) -> bool:
        return self.call("DeregisterImage", [("ImageId", str(image_id))])

    def describe_image_attribute(self, image_id: str, attribute: str) -> Any:
        """Return a single image attribute (``description``, ``launchPermission``...)."""
        return self.call(
            "DescribeImageAttribute",
            [("ImageId", str(image_id)), ("Attribute", attribute)],
        )

    def modify_image_attribute(self, image_id: str, **options: Any) -> bool:
        """Change an image's description, launch permissions or product codes.

        Launch permission options are ``launch_add_user``,
        ``launch_remove_user``, ``launch_add_group`` and
        ``launch_remove_group``; each accepts a scalar or a list.
        """
        args = self._args("modify_image_attribute", None, (), options)
        args["image_id"] = image_id
        require(args, "modify_image_attribute", "image_id")
        params = single_param("ImageId", args) + value_param("Description", args)
        for option, op, kind in (
            ("launch_add_user", "Add", "UserId"),
            ("launch_remove_user", "Remove", "UserId"),
            ("launch_add_group", "Add", "Group"),
            ("launch_remove_group", "Remove", "Group"),
        ):
            params += permission_param("LaunchPermission", op, kind, args.get(option))
        params += list_param("ProductCode", args)
        if len(params) == 1:
            raise ArgumentError(
                "attribute", "modify_image_attribute",
                "modify_image_attribute(): nothing to modify",
            )
        return self.call("ModifyImageAttribute", params)

    def reset_image_attribute(self, image_id: str, attribute: str = "launchPermission") -> bool:
        return self.call(
            "ResetImageAttribute",
            [("ImageId", str(image_id)), ("Attribute", attribute)],
        )
