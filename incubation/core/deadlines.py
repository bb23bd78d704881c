"""Bounded waits on storage calls.

A call that does not finish within its timeout is reported as
``DependencyUnavailable``. The worker thread is left to finish on its own and
its result is dropped; callers never see a partial answer.
"""
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeout
from typing import Any, Callable, TypeVar

from incubation.core.exceptions import DependencyUnavailable

T = TypeVar("T")

_pool = ThreadPoolExecutor(max_workers=8, thread_name_prefix="storage-call")


def call_with_timeout(fn: Callable[..., T], *args: Any, timeout: float, what: str = "storage call") -> T:
    """Run ``fn(*args)`` on the shared pool and wait at most ``timeout`` seconds.

    Exceptions raised by ``fn`` propagate unchanged.
    """
    future = _pool.submit(fn, *args)
    try:
        return future.result(timeout=timeout)
    except FuturesTimeout as e:
        future.cancel()
        raise DependencyUnavailable(f"{what} timed out after {timeout}s", {"timeout": timeout}) from e
