"""Errors raised by the message bus."""

from typing import Any, Sequence


class MessageBusError(Exception):
    """Base class for message bus errors."""


class NoEndpointRegisteredError(MessageBusError):
    """Raised by invoke when no subscription matches the message."""

    def __init__(self, endpoint: Sequence[Any]):
        self.endpoint = list(endpoint)
        super().__init__(f"No endpoint registered for {self.endpoint!r}")


class BusTimeoutError(MessageBusError, TimeoutError):
    """An RPC call did not complete before its deadline.

    Attributes:
        brokers: Brokers whose endpoints had not resolved when the
            deadline passed.
    """

    def __init__(self, brokers: Sequence[Any] = (), timeout: float | None = None):
        self.brokers = list(brokers)
        self.timeout = timeout
        names = ", ".join(str(getattr(b, "id", b)) for b in self.brokers)
        super().__init__(f"Timed out after {timeout}s waiting for [{names}]")


class InvokeTimeoutError(BusTimeoutError):
    """invoke timed out waiting for its single endpoint."""


class InvokeAllTimeoutError(BusTimeoutError):
    """invoke_all timed out; brokers lists the endpoints still pending."""


class InvalidUsageError(MessageBusError, ValueError):
    """The bus was called with arguments it does not support."""
