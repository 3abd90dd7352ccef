"""In-process message bus with prefix matching, interceptors and RPC."""

import asyncio
import functools
from typing import Any, Callable, Optional

from loguru import logger

from prefixbus.bus.base import BaseBus, Dispatcher
from prefixbus.bus.context import call_as
from prefixbus.bus.errors import (
    InvalidUsageError,
    InvokeAllTimeoutError,
    InvokeTimeoutError,
    NoEndpointRegisteredError,
)
from prefixbus.bus.futures import (
    as_future,
    failed_future,
    gather_results,
    ignore_outcome,
    race_timeout,
)
from prefixbus.bus.interceptors import Interceptor, InterceptorPipeline
from prefixbus.bus.options import RequestOptions, build_options
from prefixbus.bus.rpc import ResponseTracker, fan_out
from prefixbus.bus.subscriptions import (
    DERIVE_ARITY,
    Subscription,
    SubscriptionRegistry,
    normalize_pattern,
)
from prefixbus.config.schema import BusConfig


def immediate_dispatcher(thunk: Callable[[], Any]) -> Any:
    """Default dispatcher: run the subscriber right away."""
    return thunk()


class MessageBus(BaseBus):
    """
    Message bus for components that talk through structural matching.

    Messages are lists whose leading values select the subscribers:
    a subscription on ``("user", "saved")`` receives every message
    starting with those two values and is called with the rest.
    Interceptors see each message first and may rewrite or drop it.

    All operations returning futures must run on an asyncio event loop.
    Subscribers may be plain functions or coroutine functions.
    """

    def __init__(self, config: Optional[BusConfig] = None):
        self._config = config or BusConfig()
        self.subscriptions = SubscriptionRegistry()
        self.interceptors = InterceptorPipeline()
        self._dispatcher: Dispatcher = immediate_dispatcher
        self._started = False

    @property
    def config(self) -> BusConfig:
        return self._config

    @property
    def started(self) -> bool:
        return self._started

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    def start(self) -> asyncio.Future:
        self._started = True
        system = self.broker(self._config.system_broker_id)
        return system.emit(self._config.system_ready_message)

    def set_dispatcher(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    # Dispatch

    def emit(self, broker: Any, *message: Any) -> asyncio.Future:
        """
        Send a message through the interceptors to every matching subscriber.

        Args:
            broker: Sender
            *message: Message values, topic first

        Returns:
            Future resolving to the non-None subscriber results once all of
            them settled, or to whatever a vetoing interceptor returned.
        """
        if not message:
            raise InvalidUsageError("Cannot emit an empty message")
        if not self._started and self._config.warn_before_start:
            logger.warning(
                f"{getattr(broker, 'id', broker)} is emitting {message[0]!r} before setup "
                f"is completed. This message might get lost."
            )
        try:
            result = self.interceptors.run_chain(list(message), self.deliver_immediately)
        except Exception as exc:
            return failed_future(exc)
        return as_future(result)

    def deliver_immediately(self, message: list) -> asyncio.Future:
        """Call every matching subscriber, skipping the interceptors."""
        results = []
        for subscription, args in self.subscriptions.match_all(message):
            try:
                result = self.call_subscriber(subscription, args)
            except Exception as exc:
                result = failed_future(exc)
            if result is not None:
                results.append(result)
        return gather_results(results)

    def call_subscriber(self, subscription: Subscription, args: list) -> Any:
        """Run a subscriber inline when synchronous, else via the dispatcher."""
        thunk = functools.partial(call_as, subscription.broker, subscription.callback, args)
        if subscription.synchronous:
            return thunk()
        return self._dispatcher(thunk)

    # Subscriptions

    def on(
        self,
        broker: Any,
        *pattern_then_callback: Any,
        sync: bool | None = None,
        arity: Any = DERIVE_ARITY,
    ) -> Subscription:
        if not pattern_then_callback or not callable(pattern_then_callback[-1]):
            raise InvalidUsageError("The last argument of on() must be the callback")
        *pattern_args, callback = pattern_then_callback
        pattern, options = normalize_pattern(tuple(pattern_args))
        if sync is None:
            sync = options.get("sync", False)
        if arity is DERIVE_ARITY:
            arity = options.get("arity", DERIVE_ARITY)
        return self.subscribe(broker, pattern, callback, sync=sync, arity=arity)

    def subscribe(
        self,
        broker: Any,
        pattern: tuple,
        callback: Callable[..., Any],
        sync: bool = False,
        arity: Any = DERIVE_ARITY,
    ) -> Subscription:
        return self.subscriptions.subscribe(broker, pattern, callback, sync=sync, arity=arity)

    def intercept(self, *pattern_then_callback: Any) -> Interceptor:
        if not pattern_then_callback or not callable(pattern_then_callback[-1]):
            raise InvalidUsageError("The last argument of intercept() must be the callback")
        *pattern, callback = pattern_then_callback
        return self.interceptors.add(tuple(pattern), callback)

    # RPC

    def request(self, broker: Any, *args: Any, **options: Any) -> list[asyncio.Future]:
        """
        Call every matching endpoint without aggregating.

        Returns:
            One future per endpoint, in registration order

        Raises:
            InvalidUsageError: If a timeout is given
        """
        call_options = build_options(broker, args, inherit_timeout=False, **options)
        if call_options.timeout is not None:
            raise InvalidUsageError(
                "Timeout not supported for request. Please use either invoke or invoke_all."
            )
        return self._request(call_options)

    def invoke(self, broker: Any, *args: Any, **options: Any) -> asyncio.Future:
        """
        Call the first matching endpoint.

        Every matching endpoint is called, but only the first registered
        one is observed. With a timeout the call fails with
        InvokeTimeoutError when the endpoint is too slow; the endpoint
        itself keeps running.
        """
        call_options = build_options(broker, args, **options)
        matches = self.subscriptions.match_all(call_options.message)
        futures = fan_out(matches, call_options, self._dispatch)
        if not futures:
            return failed_future(NoEndpointRegisteredError(call_options.message))
        if len(futures) > 1:
            logger.warning(
                f"Total of {len(futures)} endpoints registered for message {call_options.message!r}"
            )
            for extra in futures[1:]:
                ignore_outcome(extra)

        if call_options.timeout is None:
            return futures[0]
        endpoint = matches[0][0].broker
        timeout = call_options.timeout
        return race_timeout(futures[0], timeout, lambda: InvokeTimeoutError([endpoint], timeout))

    def invoke_all(self, broker: Any, *args: Any, **options: Any) -> asyncio.Future:
        """
        Call every matching endpoint and collect the results.

        Resolves to the results in registration order, or to an empty list
        when nothing matched. With a timeout the call fails with
        InvokeAllTimeoutError listing the brokers still pending.
        """
        call_options = build_options(broker, args, **options)
        if call_options.timeout is None:
            return gather_results(self._request(call_options))

        tracker = ResponseTracker()
        user_map = call_options.map

        def instrument(future: asyncio.Future, endpoint: Any) -> Any:
            tracked = tracker.track(future, endpoint)
            if user_map is None:
                return tracked
            mapped = user_map(tracked, endpoint)
            return tracked if mapped is None else mapped

        call_options.map = instrument
        timeout = call_options.timeout
        aggregate = gather_results(self._request(call_options))
        return race_timeout(aggregate, timeout, lambda: InvokeAllTimeoutError(tracker.pending(), timeout))

    def _request(self, options: RequestOptions) -> list[asyncio.Future]:
        matches = self.subscriptions.match_all(options.message)
        return fan_out(matches, options, self._dispatch)

    def _dispatch(self, subscription: Subscription, args: list) -> Any:
        return self._dispatcher(
            functools.partial(call_as, subscription.broker, subscription.callback, args)
        )
