"""Message bus wrapper logging every operation."""

import asyncio
import functools
from typing import Any, Callable

from loguru import logger

from prefixbus.bus.base import BaseBus, Dispatcher
from prefixbus.bus.interceptors import Interceptor
from prefixbus.bus.subscriptions import DERIVE_ARITY, Subscription
from prefixbus.config.schema import BusConfig


def _name(broker: Any) -> str:
    return str(getattr(broker, "id", broker))


class LoggingMessageBus(BaseBus):
    """
    Logs entry and exit of every bus operation.

    Wraps another bus and forwards each call unchanged; results, futures
    and exceptions are passed through as they are. Log records carry
    ``broker`` and ``operation`` extras for structured sinks.
    """

    def __init__(self, inner: BaseBus):
        self.inner = inner

    @property
    def config(self) -> BusConfig:
        return self.inner.config

    @property
    def started(self) -> bool:
        return self.inner.started

    def start(self) -> asyncio.Future:
        self._log("MessageBus", "start", "Starting bus")
        return self.inner.start()

    def set_dispatcher(self, dispatcher: Dispatcher) -> None:
        self._log("MessageBus", "set_dispatcher", "Dispatcher set to {!r}", dispatcher)
        self.inner.set_dispatcher(dispatcher)

    def emit(self, broker: Any, *message: Any) -> asyncio.Future:
        self._log(broker, "emit", "{} emit {!r}", _name(broker), list(message))
        result = self.inner.emit(broker, *message)
        self._log_outcome(broker, "emit", result)
        return result

    def on(
        self,
        broker: Any,
        *pattern_then_callback: Any,
        sync: bool | None = None,
        arity: Any = DERIVE_ARITY,
    ) -> Subscription:
        *pattern, callback = pattern_then_callback or (None,)
        if callable(callback):
            pattern_then_callback = (*pattern, self._wrap_subscriber(broker, callback))
        self._log(broker, "subscribe", "{} subscribed to {!r}", _name(broker), pattern)
        return self.inner.on(broker, *pattern_then_callback, sync=sync, arity=arity)

    def intercept(self, *pattern_then_callback: Any) -> Interceptor:
        *pattern, callback = pattern_then_callback or (None,)
        if callable(callback):
            pattern_then_callback = (*pattern, self._wrap_interceptor(pattern, callback))
        self._log("MessageBus", "intercept", "intercept {!r}", pattern)
        return self.inner.intercept(*pattern_then_callback)

    def request(self, broker: Any, *args: Any, **options: Any) -> list[asyncio.Future]:
        self._log(broker, "request", "{} request {!r}", _name(broker), list(args))
        futures = self.inner.request(broker, *args, **options)
        self._log(broker, "request", "{} request reached {} endpoint(s)", _name(broker), len(futures))
        return futures

    def invoke(self, broker: Any, *args: Any, **options: Any) -> asyncio.Future:
        self._log(broker, "invoke", "{} invoke {!r}", _name(broker), list(args))
        result = self.inner.invoke(broker, *args, **options)
        self._log_outcome(broker, "invoke", result)
        return result

    def invoke_all(self, broker: Any, *args: Any, **options: Any) -> asyncio.Future:
        self._log(broker, "invoke_all", "{} invoke_all {!r}", _name(broker), list(args))
        result = self.inner.invoke_all(broker, *args, **options)
        self._log_outcome(broker, "invoke_all", result)
        return result

    def _wrap_subscriber(self, broker: Any, callback: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(callback)
        def logged(*args: Any) -> Any:
            self._log(broker, "call", "calling {} with {!r}", _name(broker), list(args))
            return callback(*args)

        return logged

    def _wrap_interceptor(self, pattern: list, callback: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(callback)
        def logged(message: list, proceed: Callable[..., Any]) -> Any:
            self._log("MessageBus", "call_interceptor", "interceptor {!r} got {!r}", pattern, message)
            return callback(message, proceed)

        return logged

    def _log_outcome(self, broker: Any, operation: str, result: Any) -> None:
        if not isinstance(result, asyncio.Future):
            return

        def _done(future: asyncio.Future) -> None:
            if future.cancelled():
                self._log(broker, operation, "{} {} cancelled", _name(broker), operation)
            elif future.exception() is not None:
                self._log(broker, operation, "{} {} failed: {!r}", _name(broker), operation, future.exception())
            else:
                self._log(broker, operation, "{} {} done: {!r}", _name(broker), operation, future.result())

        result.add_done_callback(_done)

    def _log(self, broker: Any, operation: str, template: str, *args: Any) -> None:
        # Instrumentation must never change what the caller sees.
        try:
            logger.bind(broker=_name(broker), operation=operation).info(template, *args)
        except Exception:
            pass
