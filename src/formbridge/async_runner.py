"""Drive async store operations from sync callers."""

from __future__ import annotations

import asyncio
import threading
from queue import Queue
from typing import TYPE_CHECKING, Any, TypeVar

from formbridge.exceptions import AsyncExecutionError

if TYPE_CHECKING:
    from collections.abc import Coroutine

T = TypeVar("T")


def _run_on_worker_loop(coro: Coroutine[Any, Any, T], operation: str) -> T:
    """Run a coroutine to completion on a private event loop in a worker thread.

    Used when the caller already sits inside a running loop and cannot block on it.

    Args:
        coro: The coroutine to run.
        operation: Operation label carried by the error on failure.

    Raises:
        AsyncExecutionError: If the coroutine raises an exception.

    Returns:
        The result of the coroutine.
    """
    output: Queue[T | BaseException] = Queue(maxsize=1)

    def _worker() -> None:
        try:
            output.put(asyncio.run(coro))
        except BaseException as exc:
            output.put(exc)

    worker = threading.Thread(target=_worker, name=f"formbridge-{operation}", daemon=True)
    worker.start()
    worker.join()

    outcome = output.get()
    if isinstance(outcome, BaseException):
        raise AsyncExecutionError(result=outcome, operation=operation) from outcome
    return outcome


def run_async(coro: Coroutine[Any, Any, T], *, operation: str = "async operation") -> T:
    """Run a coroutine to completion from sync code.

    Outside an event loop the coroutine runs through `asyncio.run`. Inside a running
    loop it is handed to a worker thread so the call still blocks until every effect
    of the coroutine has landed.

    Args:
        coro: The coroutine to run.
        operation: Operation label used in error reporting.

    Returns:
        The result of the coroutine.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    return _run_on_worker_loop(coro, operation)
