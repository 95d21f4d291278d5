from __future__ import annotations

import asyncio

import pytest

from weatherbar.state.locks import ReadWriteLock


@pytest.mark.asyncio
async def test_readers_share_the_lock() -> None:
    lock = ReadWriteLock()
    async with lock.read(), lock.read():
        assert lock.readers == 2
    assert lock.readers == 0


@pytest.mark.asyncio
async def test_writer_waits_for_readers() -> None:
    lock = ReadWriteLock()
    await lock.acquire_read()

    writer = asyncio.create_task(lock.acquire_write())
    await asyncio.sleep(0)
    assert not writer.done()

    lock.release_read()
    await asyncio.wait_for(writer, timeout=0.1)
    assert lock.writer_active
    lock.release_write()


@pytest.mark.asyncio
async def test_queued_writer_blocks_new_readers() -> None:
    lock = ReadWriteLock()
    order: list[str] = []
    await lock.acquire_read()

    async def write() -> None:
        async with lock.write():
            order.append("write")

    async def read() -> None:
        async with lock.read():
            order.append("read")

    writer = asyncio.create_task(write())
    await asyncio.sleep(0)
    reader = asyncio.create_task(read())
    await asyncio.sleep(0)
    assert order == []

    lock.release_read()
    await asyncio.gather(writer, reader)
    assert order == ["write", "read"]


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_hold_lock() -> None:
    lock = ReadWriteLock()
    await lock.acquire_write()

    waiter = asyncio.create_task(lock.acquire_write())
    await asyncio.sleep(0)
    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter

    lock.release_write()
    assert not lock.writer_active
    async with lock.read():
        assert lock.readers == 1


def test_release_without_acquire() -> None:
    lock = ReadWriteLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()
