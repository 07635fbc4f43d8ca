"""Key pair actions."""
from __future__ import annotations

from typing import Any, List

from ..dispatch import Boolean, FetchItems, FetchOne
from ..encoding import base64_param, filter_param, list_param, require, single_param
from ..models import KeyPair

ACTIONS = (
    ("DescribeKeyPairs", FetchItems("keySet", KeyPair)),
    ("CreateKeyPair", FetchOne(None, KeyPair)),
    ("ImportKeyPair", FetchOne(None, KeyPair)),
    ("DeleteKeyPair", Boolean()),
)


class KeyPairMethods:
    """Key pair calls mixed into EC2Client."""

    def describe_key_pairs(self, *key_names: Any, **options: Any) -> List[KeyPair]:
        args = self._args("describe_key_pairs", "key_name", key_names, options)
        return self.call("DescribeKeyPairs", list_param("KeyName", args) + filter_param(args))

    def create_key_pair(self, key_name: str) -> KeyPair:
        """Create a key pair; the returned KeyPair carries the private key material."""
        return self.call("CreateKeyPair", [("KeyName", str(key_name))])

    def import_key_pair(self, **options: Any) -> KeyPair:
        args = self._args("import_key_pair", None, (), options)
        require(args, "import_key_pair", "key_name", "public_key_material")
        params = single_param("KeyName", args) + base64_param("PublicKeyMaterial", args)
        return self.call("ImportKeyPair", params)

    def delete_key_pair(self, key_name: str) -> bool:
        return self.call("DeleteKeyPair", [("KeyName", str(key_name))])
