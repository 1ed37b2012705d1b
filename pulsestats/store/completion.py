"""
Single-shot completion bridging

Stores report results through a callback invoked exactly once. This module
turns that callback into an awaitable:

    Service:
        result = await await_completion(
            lambda completion: store.run_sample_query(..., completion),
            "run_sample_query",
        )

    Store (any thread):
        completion(samples, None)   # success
        completion(None, error)     # failure

Misuse is reported loudly: a second call, a call with both result and error,
or a call with neither raises PreconditionError to the caller of the
completion. A completion dropped without ever being called fails the awaiting
request with PreconditionError instead of leaving it suspended forever.

Cancelling the awaiting task does not abort the store's work; the late
completion is accepted and ignored.
"""

import asyncio
import logging
import threading
import weakref
from typing import Any, Callable, Optional

from ..core.exceptions import PreconditionError, PulseStatsException, StoreExecutionError


def _settle(future: asyncio.Future, label: str, result: Any, error: Optional[BaseException]) -> None:
    """Runs on the future's loop."""
    if future.done():
        logging.debug(f"[Completion] {label}: late completion ignored, request no longer waiting")
        return

    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)


def _schedule(loop: asyncio.AbstractEventLoop, future: asyncio.Future, label: str,
              result: Any, error: Optional[BaseException]) -> None:
    if loop.is_closed():
        logging.warning(f"[Completion] {label}: event loop closed, completion dropped")
        return
    loop.call_soon_threadsafe(_settle, future, label, result, error)


def _fail_unresolved(loop: asyncio.AbstractEventLoop, future: asyncio.Future, label: str) -> None:
    logging.error(f"[Completion] {label}: completion released without being called")
    _schedule(
        loop, future, label, None,
        PreconditionError(f"Store never completed {label}")
    )


class SingleShotCompletion:
    """
    Callback handed to a store, resolving an asyncio future exactly once

    Thread-safe: can be called from any thread.
    """

    def __init__(self, future: asyncio.Future, label: str):
        self._future = future
        self._loop = future.get_loop()
        self._label = label
        self._called = False
        self._lock = threading.Lock()

        # The finalizer must not reference self.
        self._finalizer = weakref.finalize(self, _fail_unresolved, self._loop, future, label)
        self._finalizer.atexit = False

    def detach(self) -> None:
        """Stop watching for an unresolved release (the request is no longer waiting)"""
        self._finalizer.detach()

    @property
    def called(self) -> bool:
        return self._called

    def __call__(self, result: Any = None, error: Optional[BaseException] = None) -> None:
        with self._lock:
            if self._called:
                logging.error(f"[Completion] {self._label}: completion called more than once")
                raise PreconditionError(f"Completion for {self._label} called more than once")
            self._called = True

        self._finalizer.detach()

        if (result is None) == (error is None):
            message = (
                f"Completion for {self._label} called with both result and error"
                if error is not None else
                f"Completion for {self._label} called with neither result nor error"
            )
            logging.error(f"[Completion] {message}")
            _schedule(self._loop, self._future, self._label, None, PreconditionError(message))
            raise PreconditionError(message)

        _schedule(self._loop, self._future, self._label, result, error)


async def await_completion(submit: Callable[[SingleShotCompletion], None], operation: str) -> Any:
    """
    Submit a store call and wait for its completion

    Args:
        submit: Starts the store call, passing it the completion
        operation: Store operation name, used in errors and logs

    Returns:
        The result the store delivered

    Raises:
        StoreExecutionError: If the store reported a failure (or raised while submitting)
        PreconditionError: If the completion was misused or never called
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()
    completion = SingleShotCompletion(future, operation)

    try:
        submit(completion)
    except Exception as error:
        completion.detach()
        if isinstance(error, PulseStatsException):
            raise
        raise StoreExecutionError(operation, error) from error

    # Only the store holds the completion from here on.
    del completion

    try:
        return await future
    except PreconditionError:
        raise
    except Exception as error:
        logging.warning(f"[Completion] {operation} failed in store: {type(error).__name__}")
        raise StoreExecutionError(operation, error) from error
