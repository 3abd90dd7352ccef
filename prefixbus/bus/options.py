"""Per-call options for RPC operations."""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any, Awaitable, Callable, Optional

from prefixbus.bus.errors import InvalidUsageError

# map(future, broker) -> awaitable observed instead of the raw future
MapFunction = Callable[[Any, Any], Awaitable[Any]]

# Subscription keys accepted in an options mapping and ignored by RPC
SUBSCRIPTION_ONLY_KEYS = frozenset({"sync", "arity"})


@dataclass
class RequestOptions:
    """Options of a single request/invoke/invoke_all call.

    Also used as the per-broker defaults; unset fields are None.
    """

    message: list = field(default_factory=list)
    timeout: Optional[float] = None
    map: Optional[MapFunction] = None

    def merged(self, **overrides: Any) -> "RequestOptions":
        """Return a copy with every non-None override applied."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise InvalidUsageError(f"Unknown request options: {sorted(unknown)}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def is_options(value: Any) -> bool:
    """Check whether a leading call argument is an options object."""
    if isinstance(value, RequestOptions):
        return True
    return isinstance(value, Mapping) and "message" in value


def build_options(
    broker: Any,
    args: tuple,
    inherit_timeout: bool = True,
    **overrides: Any,
) -> RequestOptions:
    """Normalize call arguments into RequestOptions.

    Args:
        broker: Calling broker; its ``options`` attribute holds defaults
        args: Either the message values, or a single leading options object
        inherit_timeout: Whether the broker default timeout applies
        **overrides: Keyword options (timeout, map) applied last

    Returns:
        Fresh RequestOptions; the broker defaults are left untouched
    """
    defaults = getattr(broker, "options", None) or RequestOptions()
    options = replace(defaults, message=list(defaults.message))
    if not inherit_timeout:
        options.timeout = None

    if args and is_options(args[0]):
        given = args[0]
        if isinstance(given, RequestOptions):
            given = {f.name: getattr(given, f.name) for f in fields(given)}
        else:
            given = {k: v for k, v in given.items() if k not in SUBSCRIPTION_ONLY_KEYS}
        options = options.merged(**given)
    else:
        options.message = list(args)

    options = options.merged(**overrides)
    if not isinstance(options.message, (list, tuple)):
        options.message = [options.message]
    options.message = list(options.message)

    if not options.message:
        raise InvalidUsageError("A message needs at least one element")
    if options.timeout is not None and options.timeout <= 0:
        raise InvalidUsageError(f"Timeout must be positive, got {options.timeout}")
    return options
