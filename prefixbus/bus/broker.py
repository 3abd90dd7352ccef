"""Broker handle: bus operations bound to one identity."""

from typing import TYPE_CHECKING, Any, Optional

from prefixbus.bus.options import RequestOptions

if TYPE_CHECKING:
    from prefixbus.bus.base import BaseBus


class Broker:
    """
    An identity on the bus.

    Every call is forwarded to the bus with this broker as the sender or
    owner. ``options`` holds the defaults applied to its RPC calls.
    """

    def __init__(self, bus: "BaseBus", broker_id: Any, options: Optional[RequestOptions] = None):
        self.bus = bus
        self.id = broker_id
        self.options = options or RequestOptions()

    def emit(self, *message: Any):
        return self.bus.emit(self, *message)

    def on(self, *args: Any, **kwargs: Any):
        return self.bus.on(self, *args, **kwargs)

    def register(self, *args: Any, **kwargs: Any):
        return self.bus.register(self, *args, **kwargs)

    def request(self, *args: Any, **kwargs: Any):
        return self.bus.request(self, *args, **kwargs)

    def intercept(self, *args: Any):
        return self.bus.intercept(*args)

    def invoke(self, *args: Any, **kwargs: Any):
        return self.bus.invoke(self, *args, **kwargs)

    def invoke_all(self, *args: Any, **kwargs: Any):
        return self.bus.invoke_all(self, *args, **kwargs)

    def __repr__(self) -> str:
        return f"Broker({self.id!r})"
