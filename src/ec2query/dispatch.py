"""Action registry and response dispatcher.

Each action name is bound to exactly one decode strategy. Resource modules
declare their strategies as ``(action, strategy)`` pairs; the client folds
them into an immutable ``ActionRegistry`` once, at construction time, and
hands it to a ``ResponseDispatcher``.
"""
from __future__ import annotations

import logging
from collections import abc
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

from .exceptions import UnregisteredActionError
from .utils import get_items

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Boolean:
    """Interpret the response's success flag (``<return>true</return>``)."""

    tag: str = "return"


@dataclass(frozen=True)
class FieldExtract:
    """Pull one field out of the response; ``path`` may be dotted."""

    path: str


@dataclass(frozen=True)
class FetchItems:
    """Convert every ``<item>`` of a named ``...Set`` container."""

    list_key: str
    target: Any


@dataclass(frozen=True)
class FetchOne:
    """Convert a single named record; ``object_key=None`` uses the whole response."""

    object_key: Optional[str]
    target: Any


@dataclass(frozen=True)
class Custom:
    """Arbitrary ``fn(raw_response, client)``; may make one follow-up call."""

    fn: Callable[[Dict[str, Any], Any], Any]


DecodeStrategy = Union[Boolean, FieldExtract, FetchItems, FetchOne, Custom]


class RegistryBuilder:
    """Collects registrations; a later registration for an action replaces the earlier one."""

    def __init__(self) -> None:
        self._strategies: Dict[str, DecodeStrategy] = {}

    def register(self, action: str, strategy: DecodeStrategy) -> "RegistryBuilder":
        previous = self._strategies.get(action)
        if previous is not None and previous != strategy:
            LOG.warning(
                "Replacing decode strategy for %s: %r -> %r", action, previous, strategy
            )
        self._strategies[action] = strategy
        return self

    def register_all(
        self, registrations: Union[Mapping[str, DecodeStrategy], Iterable[Tuple[str, DecodeStrategy]]]
    ) -> "RegistryBuilder":
        pairs = registrations.items() if isinstance(registrations, Mapping) else registrations
        for action, strategy in pairs:
            self.register(action, strategy)
        return self

    def build(self) -> "ActionRegistry":
        return ActionRegistry(self._strategies)


class ActionRegistry(abc.Mapping):
    """Read-only mapping from action name to decode strategy."""

    def __init__(self, strategies: Mapping[str, DecodeStrategy]) -> None:
        self._strategies = MappingProxyType(dict(strategies))

    def __getitem__(self, action: str) -> DecodeStrategy:
        return self._strategies[action]

    def __iter__(self):
        return iter(self._strategies)

    def __len__(self) -> int:
        return len(self._strategies)

    def strategy_for(self, action: str) -> DecodeStrategy:
        """Look up an action's strategy.

        Raises:
            UnregisteredActionError: If nothing is bound to the action
        """
        try:
            return self._strategies[action]
        except KeyError:
            raise UnregisteredActionError(action) from None


def _extract(raw: Mapping[str, Any], path: str) -> Any:
    value: Any = raw
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def _construct(target: Any, payload: Any, client: Any) -> Any:
    factory = getattr(target, "from_payload", None)
    if factory is not None:
        return factory(payload, client)
    return target(payload, client)


class ResponseDispatcher:
    """Turns a raw decoded response into the caller-facing result."""

    def __init__(self, registry: ActionRegistry) -> None:
        self.registry = registry

    def dispatch(self, action: str, raw: Optional[Mapping[str, Any]], client: Any = None) -> Any:
        strategy = self.registry.strategy_for(action)
        raw = raw or {}

        if isinstance(strategy, Boolean):
            return raw.get(strategy.tag) == "true"

        if isinstance(strategy, FieldExtract):
            return _extract(raw, strategy.path)

        if isinstance(strategy, FetchItems):
            return [
                _construct(strategy.target, item, client)
                for item in get_items(raw.get(strategy.list_key))
                if item is not None
            ]

        if isinstance(strategy, FetchOne):
            payload = raw if strategy.object_key is None else raw.get(strategy.object_key)
            if not payload:
                return None
            return _construct(strategy.target, payload, client)

        if isinstance(strategy, Custom):
            return strategy.fn(dict(raw), client)

        raise TypeError(f"Unknown decode strategy {strategy!r} for action {action}")
