"""Message bus module for decoupled in-process communication."""

from prefixbus.bus.base import BaseBus, Dispatcher
from prefixbus.bus.broker import Broker
from prefixbus.bus.context import current_broker
from prefixbus.bus.errors import (
    BusTimeoutError,
    InvalidUsageError,
    InvokeAllTimeoutError,
    InvokeTimeoutError,
    MessageBusError,
    NoEndpointRegisteredError,
)
from prefixbus.bus.factory import create_bus, get_global_bus, reset_global_bus
from prefixbus.bus.interceptors import Interceptor
from prefixbus.bus.logging_bus import LoggingMessageBus
from prefixbus.bus.matcher import NO_MATCH, match
from prefixbus.bus.message_bus import MessageBus, immediate_dispatcher
from prefixbus.bus.options import RequestOptions
from prefixbus.bus.subscriptions import Subscription

__all__ = [
    "BaseBus",
    "Broker",
    "BusTimeoutError",
    "Dispatcher",
    "Interceptor",
    "InvalidUsageError",
    "InvokeAllTimeoutError",
    "InvokeTimeoutError",
    "LoggingMessageBus",
    "MessageBus",
    "MessageBusError",
    "NO_MATCH",
    "NoEndpointRegisteredError",
    "RequestOptions",
    "Subscription",
    "create_bus",
    "current_broker",
    "get_global_bus",
    "immediate_dispatcher",
    "match",
    "reset_global_bus",
]
