"""Construction of bus instances."""

import threading
from typing import Optional

from prefixbus.bus.base import BaseBus
from prefixbus.bus.logging_bus import LoggingMessageBus
from prefixbus.bus.message_bus import MessageBus
from prefixbus.config.schema import BusConfig


def create_bus(config: Optional[BusConfig] = None) -> BaseBus:
    """Create an unstarted bus, wrapped for logging when configured."""
    config = config or BusConfig()
    bus = MessageBus(config)
    if config.log_calls:
        return LoggingMessageBus(bus)
    return bus


_GLOBAL_BUS: Optional[BaseBus] = None
_GLOBAL_LOCK = threading.Lock()


def get_global_bus(config: Optional[BusConfig] = None) -> BaseBus:
    """Return the process-wide bus, creating it on first use."""
    global _GLOBAL_BUS
    with _GLOBAL_LOCK:
        if _GLOBAL_BUS is None:
            _GLOBAL_BUS = create_bus(config)
    return _GLOBAL_BUS


def reset_global_bus() -> None:
    global _GLOBAL_BUS
    with _GLOBAL_LOCK:
        _GLOBAL_BUS = None
