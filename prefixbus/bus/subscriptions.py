"""Ordered registry of message subscriptions."""

import inspect
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

from loguru import logger

from prefixbus.bus.matcher import NO_MATCH, match

# Sentinel for "derive the arity from the callback signature".
DERIVE_ARITY: Any = object()


def callback_arity(callback: Callable[..., Any]) -> Optional[int]:
    """Count the positional parameters a callback accepts.

    Returns None when the callback takes *args or its signature
    cannot be inspected, meaning any number of arguments is accepted.
    """
    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError):
        return None

    count = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


def normalize_pattern(args: tuple) -> tuple[tuple, dict[str, Any]]:
    """Split subscription arguments into a pattern and options.

    Accepts either bare prefix values (``"msg", "arg"``) or a single
    leading mapping such as ``{"message": ["msg", "arg"], "sync": True}``.

    Returns:
        Tuple of (pattern, options dict)
    """
    if args and isinstance(args[0], Mapping):
        options = dict(args[0])
        message = options.pop("message", ())
        if isinstance(message, (list, tuple)):
            return tuple(message), options
        return (message,), options
    return tuple(args), {}


@dataclass(eq=False)
class Subscription:
    """A pattern paired with the callback that handles matching messages."""

    broker: Any
    pattern: tuple
    callback: Callable[..., Any]
    synchronous: bool = False
    arity: Optional[int] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    _registry: Optional["SubscriptionRegistry"] = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        return self._registry is not None and self in self._registry

    def cancel(self) -> None:
        """Stop receiving messages. Calling it again does nothing."""
        if self._registry is not None:
            self._registry.cancel(self)


class SubscriptionRegistry:
    """Subscriptions in registration order.

    The backing list is replaced rather than mutated on every change, so a
    dispatch iterating an earlier snapshot is never disturbed by a
    subscription cancelled from inside one of its callbacks.
    """

    def __init__(self):
        self._subscriptions: list[Subscription] = []

    def subscribe(
        self,
        broker: Any,
        pattern: tuple,
        callback: Callable[..., Any],
        sync: bool = False,
        arity: Any = DERIVE_ARITY,
    ) -> Subscription:
        """Add a subscription.

        Args:
            broker: Owner of the subscription
            pattern: Prefix values a message must start with
            callback: Called with the message remainder after the prefix
            sync: Run the callback inline instead of through the dispatcher
            arity: Maximum number of arguments handed to the callback on
                RPC calls; derived from the signature when omitted

        Returns:
            Subscription handle exposing cancel()
        """
        if arity is DERIVE_ARITY:
            arity = callback_arity(callback)
        subscription = Subscription(
            broker=broker,
            pattern=tuple(pattern),
            callback=callback,
            synchronous=bool(sync),
            arity=arity,
            _registry=self,
        )
        self._subscriptions = [*self._subscriptions, subscription]
        logger.debug(f"{_broker_name(broker)} subscribed to {list(pattern)}")
        return subscription

    def cancel(self, subscription: Subscription) -> None:
        """Remove a subscription by identity."""
        remaining = [s for s in self._subscriptions if s is not subscription]
        if len(remaining) != len(self._subscriptions):
            self._subscriptions = remaining
            logger.debug(
                f"{_broker_name(subscription.broker)} cancelled subscription "
                f"{subscription.id} on {list(subscription.pattern)}"
            )

    def match_all(self, message: list) -> list[tuple[Subscription, list]]:
        """Find every subscription matching the message.

        Returns:
            (subscription, remainder) pairs in registration order
        """
        matches = []
        for subscription in self._subscriptions:
            count = match(subscription.pattern, message)
            if count is not NO_MATCH:
                matches.append((subscription, message[count:]))
        return matches

    def __contains__(self, subscription: object) -> bool:
        return any(s is subscription for s in self._subscriptions)

    def __iter__(self) -> Iterator[Subscription]:
        return iter(self._subscriptions)

    def __len__(self) -> int:
        return len(self._subscriptions)


def _broker_name(broker: Any) -> str:
    return str(getattr(broker, "id", broker))
