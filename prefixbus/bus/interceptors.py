"""Interceptor chain run before a message reaches its subscribers."""

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from loguru import logger

from prefixbus.bus.matcher import NO_MATCH, match

# callback(message, proceed) -> result
InterceptorCallback = Callable[[list, Callable[..., Any]], Any]


@dataclass(eq=False)
class Interceptor:
    """A rewrite/veto hook for messages starting with ``pattern``."""

    pattern: tuple
    callback: InterceptorCallback
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    _pipeline: Optional["InterceptorPipeline"] = field(default=None, repr=False)

    def cancel(self) -> None:
        """Remove the interceptor from future chains."""
        if self._pipeline is not None:
            self._pipeline.cancel(self)


class InterceptorPipeline:
    """Interceptors in registration order."""

    def __init__(self):
        self._interceptors: list[Interceptor] = []

    def add(self, pattern: tuple, callback: InterceptorCallback) -> Interceptor:
        """Register an interceptor; an empty pattern intercepts everything."""
        interceptor = Interceptor(pattern=tuple(pattern), callback=callback, _pipeline=self)
        self._interceptors = [*self._interceptors, interceptor]
        logger.debug(f"Interceptor {interceptor.id} added for {list(pattern) or '*'}")
        return interceptor

    def cancel(self, interceptor: Interceptor) -> None:
        self._interceptors = [i for i in self._interceptors if i is not interceptor]

    def run_chain(self, message: list, deliver: Callable[[list], Any]) -> Any:
        """Thread a message through every matching interceptor.

        Each interceptor gets the current message and a ``proceed``
        continuation. ``proceed()`` keeps the message, ``proceed(*new)``
        replaces it. An interceptor that never calls ``proceed`` stops
        the chain and its return value becomes the result.

        Args:
            message: Message to run through the chain
            deliver: Called with the final message once the chain is exhausted

        Returns:
            Whatever the first interceptor (or deliver) returned
        """
        chain = iter([i for i in self._interceptors if match(i.pattern, message) is not NO_MATCH])
        current = list(message)

        def proceed(*replacement: Any) -> Any:
            nonlocal current
            if replacement:
                current = list(replacement)
            interceptor = next(chain, None)
            if interceptor is None:
                return deliver(current)
            return interceptor.callback(list(current), proceed)

        return proceed()

    def __len__(self) -> int:
        return len(self._interceptors)
