"""Future helpers shared by dispatch and RPC."""

import asyncio
import inspect
from typing import Any, Callable, Iterable

from loguru import logger


def as_future(value: Any) -> asyncio.Future:
    """Wrap a value in a future on the running loop.

    Awaitables are scheduled (coroutines become tasks); plain values
    produce an already-resolved future.
    """
    loop = asyncio.get_running_loop()
    if inspect.isawaitable(value):
        return asyncio.ensure_future(value, loop=loop)
    future = loop.create_future()
    future.set_result(value)
    return future


def gather_results(values: Iterable[Any]) -> asyncio.Future:
    """Resolve once every value settled, failing on the first error.

    Results keep the input order. Work still pending when another value
    fails keeps running.
    """
    futures = [as_future(value) for value in values]
    if not futures:
        return as_future([])
    return asyncio.gather(*futures)


def race_timeout(
    future: asyncio.Future,
    timeout: float,
    on_timeout: Callable[[], BaseException],
) -> asyncio.Future:
    """Race a future against a timer.

    The raced future is never cancelled: when the timer wins, the work
    behind it keeps running and its outcome is simply no longer observed.

    Args:
        future: Future to wait for
        timeout: Seconds to wait
        on_timeout: Builds the exception raised when the timer wins; it is
            called at the moment the deadline passes

    Returns:
        Future resolving like ``future`` or failing with on_timeout()
    """

    async def _race() -> Any:
        done, _ = await asyncio.wait({future}, timeout=timeout)
        if future in done:
            return future.result()
        ignore_outcome(future)
        raise on_timeout()

    return asyncio.ensure_future(_race())


def failed_future(exc: BaseException) -> asyncio.Future:
    """Return a future already failed with ``exc``."""
    future = asyncio.get_running_loop().create_future()
    future.set_exception(exc)
    return future


def ignore_outcome(future: asyncio.Future) -> None:
    """Mark a future whose result nobody will read."""
    future.add_done_callback(_discard_late_outcome)


def _discard_late_outcome(future: asyncio.Future) -> None:
    if not future.cancelled() and future.exception() is not None:
        logger.debug(f"Unobserved failure ignored: {future.exception()!r}")
