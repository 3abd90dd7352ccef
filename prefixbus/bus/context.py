"""Broker on whose behalf a subscriber callback is running."""

import asyncio
from contextvars import ContextVar
from typing import Any, Callable

_current_broker: ContextVar[Any] = ContextVar("prefixbus_current_broker", default=None)


def current_broker() -> Any:
    """Return the broker owning the subscription being called, if any."""
    return _current_broker.get()


def call_as(broker: Any, callback: Callable[..., Any], args: list) -> Any:
    """Call ``callback(*args)`` with ``broker`` as the current broker.

    A coroutine result is turned into a task while the broker is still
    set, so the coroutine body sees the same broker when it runs.
    """
    token = _current_broker.set(broker)
    try:
        result = callback(*args)
        if asyncio.iscoroutine(result):
            result = asyncio.get_running_loop().create_task(result)
        return result
    finally:
        _current_broker.reset(token)
