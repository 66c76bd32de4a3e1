import asyncio
from typing import Awaitable, Callable, TypeVar

from verikit.core.exceptions import TimedOut

T = TypeVar("T")


async def run_with_timeout(timeout: float, operation: Awaitable[T] | Callable[[], Awaitable[T]]) -> T:
    """Drive `operation` to completion or until `timeout` seconds elapse.

    - `operation` may be an awaitable or a zero-arg callable returning one.
    - Returns the operation's value unmodified on success.
    - On deadline expiry the operation is cancelled and `TimedOut` is raised.
    - A `TimeoutError` raised by the operation itself propagates untouched.
    """
    awaitable = operation() if callable(operation) else operation
    try:
        async with asyncio.timeout(timeout) as deadline:
            return await awaitable
    except TimeoutError as exc:
        if deadline.expired():
            raise TimedOut(timeout) from exc
        raise


async def assert_within_timeout(timeout: float, operation: Awaitable[object] | Callable[[], Awaitable[object]]) -> None:
    await run_with_timeout(timeout, operation)
