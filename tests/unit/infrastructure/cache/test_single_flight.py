# nosec B101


import asyncio

import pytest

from infrastructure.cache.single_flight import SingleFlight


@pytest.mark.asyncio
async def test_concurrent_calls_share_one_execution():
    flight = SingleFlight()
    release = asyncio.Event()
    calls = 0

    async def compute():
        nonlocal calls
        calls += 1
        await release.wait()
        return 42

    tasks = [asyncio.create_task(flight.do('key', compute)) for _ in range(10)]
    await asyncio.sleep(0)
    assert flight.in_flight('key')

    release.set()
    results = await asyncio.gather(*tasks)

    assert results == [42] * 10
    assert calls == 1
    assert not flight.in_flight('key')


@pytest.mark.asyncio
async def test_different_keys_run_independently():
    flight = SingleFlight()

    async def compute(value):
        await asyncio.sleep(0)
        return value

    results = await asyncio.gather(
        flight.do('a', lambda: compute('a')),
        flight.do('b', lambda: compute('b')),
    )

    assert results == ['a', 'b']


@pytest.mark.asyncio
async def test_failure_is_shared_and_not_remembered():
    flight = SingleFlight()
    release = asyncio.Event()
    calls = 0

    async def failing():
        nonlocal calls
        calls += 1
        await release.wait()
        raise RuntimeError('boom')

    tasks = [asyncio.create_task(flight.do('key', failing)) for _ in range(3)]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*tasks, return_exceptions=True)

    assert all(isinstance(r, RuntimeError) for r in results)
    assert calls == 1

    async def succeeding():
        return 'ok'

    assert await flight.do('key', succeeding) == 'ok'


@pytest.mark.asyncio
async def test_cancelling_one_caller_keeps_computation_for_others():
    flight = SingleFlight()
    release = asyncio.Event()

    async def compute():
        await release.wait()
        return 'done'

    first = asyncio.create_task(flight.do('key', compute))
    second = asyncio.create_task(flight.do('key', compute))
    await asyncio.sleep(0)

    first.cancel()
    await asyncio.sleep(0)
    release.set()

    assert await second == 'done'
    with pytest.raises(asyncio.CancelledError):
        await first


@pytest.mark.asyncio
async def test_cancelling_last_caller_aborts_and_allows_retry():
    flight = SingleFlight()
    started = asyncio.Event()
    aborted = asyncio.Event()

    async def slow():
        started.set()
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            aborted.set()
            raise

    caller = asyncio.create_task(flight.do('key', slow))
    await started.wait()

    caller.cancel()
    with pytest.raises(asyncio.CancelledError):
        await caller
    await asyncio.wait_for(aborted.wait(), timeout=1)

    assert not flight.in_flight('key')

    async def fast():
        return 'retried'

    assert await flight.do('key', fast) == 'retried'
