"""Building blocks of the request/invoke/invoke_all calls."""

import asyncio
from typing import Any, Callable

from prefixbus.bus.futures import as_future, failed_future
from prefixbus.bus.options import RequestOptions
from prefixbus.bus.subscriptions import Subscription


def bound_args(subscription: Subscription, remainder: list) -> list:
    """Drop arguments beyond what the subscription declared it accepts."""
    if subscription.arity is None:
        return list(remainder)
    return list(remainder[: subscription.arity])


def fan_out(
    matches: list[tuple[Subscription, list]],
    options: RequestOptions,
    call: Callable[[Subscription, list], Any],
) -> list[asyncio.Future]:
    """Call every matched subscription and collect one future per endpoint.

    Args:
        matches: (subscription, remainder) pairs in registration order
        options: Call options; ``options.map`` wraps each endpoint future
        call: Invokes a subscription with its arguments

    Returns:
        Futures in registration order
    """
    futures = []
    for subscription, remainder in matches:
        try:
            future = as_future(call(subscription, bound_args(subscription, remainder)))
        except Exception as exc:
            future = failed_future(exc)
        if options.map is not None:
            future = as_future(options.map(future, subscription.broker))
        futures.append(future)
    return futures


class ResponseTracker:
    """Records which endpoints of an invoke_all call have resolved."""

    def __init__(self):
        self._endpoints: list[list] = []

    def track(self, future: asyncio.Future, broker: Any) -> asyncio.Future:
        entry = [broker, False]
        self._endpoints.append(entry)

        def _record(done: asyncio.Future) -> None:
            if not done.cancelled() and done.exception() is None:
                entry[1] = True

        future.add_done_callback(_record)
        return future

    def pending(self) -> list:
        """Brokers of the endpoints that have not resolved yet."""
        return [broker for broker, resolved in self._endpoints if not resolved]
