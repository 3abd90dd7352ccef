"""Base message bus interface."""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable

from prefixbus.bus.broker import Broker
from prefixbus.bus.interceptors import Interceptor
from prefixbus.bus.options import RequestOptions
from prefixbus.bus.subscriptions import DERIVE_ARITY, Subscription
from prefixbus.config.schema import BusConfig

# dispatcher(thunk) -> whatever the thunk returned, or a stand-in
Dispatcher = Callable[[Callable[[], Any]], Any]


class BaseBus(ABC):
    """
    Abstract base class for message buses.

    MessageBus implements the dispatch engine; wrappers such as
    LoggingMessageBus implement the same interface by forwarding.
    """

    @property
    @abstractmethod
    def config(self) -> BusConfig:
        """Configuration the bus was created with."""
        pass

    @property
    @abstractmethod
    def started(self) -> bool:
        pass

    @abstractmethod
    def start(self) -> asyncio.Future:
        """Mark the bus started and emit the system-ready message."""
        pass

    @abstractmethod
    def set_dispatcher(self, dispatcher: Dispatcher) -> None:
        """Replace the strategy used for non-synchronous subscribers."""
        pass

    @abstractmethod
    def emit(self, broker: Any, *message: Any) -> asyncio.Future:
        """Send a message to every matching subscriber."""
        pass

    @abstractmethod
    def on(
        self,
        broker: Any,
        *pattern_then_callback: Any,
        sync: bool | None = None,
        arity: Any = DERIVE_ARITY,
    ) -> Subscription:
        """Subscribe; the last positional argument is the callback."""
        pass

    def register(self, broker: Any, *pattern_then_callback: Any, **kwargs: Any) -> Subscription:
        """Alias of on(), used for RPC endpoints."""
        return self.on(broker, *pattern_then_callback, **kwargs)

    @abstractmethod
    def intercept(self, *pattern_then_callback: Any) -> Interceptor:
        """Register an interceptor; the last positional argument is the callback."""
        pass

    @abstractmethod
    def request(self, broker: Any, *args: Any, **options: Any) -> list[asyncio.Future]:
        """Call every matching endpoint, returning one future per endpoint."""
        pass

    @abstractmethod
    def invoke(self, broker: Any, *args: Any, **options: Any) -> asyncio.Future:
        """Call the first matching endpoint."""
        pass

    @abstractmethod
    def invoke_all(self, broker: Any, *args: Any, **options: Any) -> asyncio.Future:
        """Call every matching endpoint and collect all results."""
        pass

    def broker(self, broker_id: Any) -> Broker:
        """Get a handle bound to ``broker_id``."""
        return Broker(self, broker_id, RequestOptions(timeout=self.config.default_timeout))

    get_actor_handle = broker
