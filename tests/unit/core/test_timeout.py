import asyncio

import pytest

from verikit.core.exceptions import TimedOut
from verikit.core.timeout import assert_within_timeout, run_with_timeout

pytestmark = pytest.mark.unit


@pytest.mark.asyncio
async def test_returns_operation_value_unmodified() -> None:
    payload = {"id": "abc", "items": [1, 2, 3]}

    async def op() -> dict[str, object]:
        await asyncio.sleep(0)
        return payload

    assert await run_with_timeout(1.0, op()) is payload


@pytest.mark.asyncio
async def test_accepts_zero_arg_callable() -> None:
    async def op() -> int:
        return 42

    assert await run_with_timeout(1.0, op) == 42


@pytest.mark.asyncio
async def test_times_out_with_fixed_message() -> None:
    with pytest.raises(TimedOut) as exc_info:
        await run_with_timeout(0.05, asyncio.sleep(10))

    assert str(exc_info.value) == "Unable to complete within timeout"
    assert exc_info.value.timeout == 0.05
    assert isinstance(exc_info.value, AssertionError)


@pytest.mark.asyncio
async def test_does_not_block_beyond_deadline() -> None:
    loop = asyncio.get_running_loop()
    started = loop.time()

    with pytest.raises(TimedOut):
        await run_with_timeout(0.1, asyncio.sleep(5))

    assert loop.time() - started < 0.6


@pytest.mark.asyncio
async def test_abandoned_operation_is_cancelled() -> None:
    cancelled = asyncio.Event()

    async def op() -> None:
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.set()
            raise

    with pytest.raises(TimedOut):
        await run_with_timeout(0.05, op())

    assert cancelled.is_set()


@pytest.mark.asyncio
async def test_inner_timeout_error_is_not_converted() -> None:
    async def op() -> None:
        raise TimeoutError("upstream gave up")

    with pytest.raises(TimeoutError, match="upstream gave up") as exc_info:
        await run_with_timeout(1.0, op())

    assert not isinstance(exc_info.value, TimedOut)


@pytest.mark.asyncio
async def test_operation_errors_propagate() -> None:
    async def op() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        await run_with_timeout(1.0, op())


@pytest.mark.asyncio
async def test_assert_within_timeout() -> None:
    await assert_within_timeout(1.0, asyncio.sleep(0))

    with pytest.raises(TimedOut):
        await assert_within_timeout(0.01, asyncio.sleep(1))
