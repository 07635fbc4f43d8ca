"""EC2 Query API client."""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from . import resources
from .aliases import aliases_for
from .config import ClientConfig
from .dispatch import ActionRegistry, DecodeStrategy, RegistryBuilder, ResponseDispatcher
from .encoding import collect_args, resolve_aliases
from .exceptions import TransportError
from .poller import EventualConsistencyPoller
from .resources.addresses import AddressMethods
from .resources.customer_gateways import CustomerGatewayMethods
from .resources.dhcp import DhcpOptionsMethods
from .resources.images import ImageMethods
from .resources.internet_gateways import InternetGatewayMethods
from .resources.key_pairs import KeyPairMethods
from .resources.network_acls import NetworkAclMethods
from .resources.reserved_instances import ReservedInstanceMethods
from .resources.route_tables import RouteTableMethods
from .resources.security_groups import SecurityGroupMethods
from .resources.tags import TagMethods
from .resources.vpcs import VpcMethods
from .transport import QueryTransport, Transport

logger = logging.getLogger(__name__)

Overrides = Union[Mapping[str, DecodeStrategy], Iterable[Tuple[str, DecodeStrategy]]]


def _log(level: int, message: str, **fields: Any) -> None:
    payload = {"message": message, **fields}
    logger.log(level, json.dumps(payload, sort_keys=True, default=str))


def build_registry(overrides: Optional[Overrides] = None) -> ActionRegistry:
    """Fold every built-in registration, then ``overrides``, into a registry.

    Later registrations for the same action replace earlier ones, so
    ``overrides`` always win.
    """
    builder = RegistryBuilder().register_all(resources.all_actions())
    if overrides:
        builder.register_all(overrides)
    return builder.build()


class EC2Client(
    ImageMethods,
    AddressMethods,
    SecurityGroupMethods,
    RouteTableMethods,
    InternetGatewayMethods,
    CustomerGatewayMethods,
    DhcpOptionsMethods,
    NetworkAclMethods,
    ReservedInstanceMethods,
    TagMethods,
    VpcMethods,
    KeyPairMethods,
):
    """One method per EC2 action, decoded through the action registry."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
        overrides: Optional[Overrides] = None,
        poller: Optional[EventualConsistencyPoller] = None,
    ):
        """Initialize the client.

        Args:
            config: Optional configuration (default: ``ClientConfig.from_env()``)
            transport: Optional transport (default: a signed QueryTransport)
            overrides: Extra ``action -> strategy`` registrations, applied last
            poller: Optional poller (default: built from the configuration)
        """
        self.config = config or ClientConfig.from_env()
        self.transport = transport or QueryTransport(self.config)
        self.registry = build_registry(overrides)
        self.dispatcher = ResponseDispatcher(self.registry)
        self.poller = poller or EventualConsistencyPoller(
            interval=self.config.poll_interval,
            deadline=self.config.poll_deadline,
            initial_delay=self.config.poll_initial_delay,
        )

    def _args(
        self,
        operation: str,
        default_option: Optional[str],
        positional: Sequence[Any],
        options: Mapping[str, Any],
    ) -> Dict[str, Any]:
        args = collect_args(default_option, positional, options)
        return resolve_aliases(args, aliases_for(operation))

    def call_raw(self, action: str, params: Sequence[Tuple[str, str]] = ()) -> Dict[str, Any]:
        """Send an action and return the undecoded response."""
        _log(logging.DEBUG, "calling action", action=action, parameters=len(params))
        return self.transport.send(action, list(params))

    def call(self, action: str, params: Sequence[Tuple[str, str]] = ()) -> Any:
        """Send an action and decode its response through the registry.

        The decode strategy is looked up before anything is sent, so an
        unregistered action never reaches the wire.

        Raises:
            UnregisteredActionError: If no strategy is bound to ``action``
            TransportError: If the request fails
        """
        self.registry.strategy_for(action)
        raw = self.call_raw(action, params)
        return self.dispatcher.dispatch(action, raw, self)

    def _visible(self, describe: Callable[[str], Any]) -> Callable[[str], Any]:
        """Wrap a describe-by-id call so that ``*.NotFound`` means "not yet"."""

        def check(resource_id: str) -> Any:
            try:
                return describe(resource_id)
            except TransportError as e:
                if e.is_not_found:
                    return None
                raise

        return check

    def _await(self, resource_id: Optional[str], describe: Callable[[str], Any], wait: bool) -> Any:
        if not resource_id:
            return None
        if wait:
            return self.poller.wait(resource_id, describe)
        return self.poller.submit(resource_id, describe)
