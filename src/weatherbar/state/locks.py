"""Reader/writer lock for asyncio tasks."""

from __future__ import annotations

import asyncio
import collections
import contextlib
from collections.abc import AsyncIterator


class ReadWriteLock:
    """Many concurrent readers or one writer.

    Waiters are granted in arrival order: a reader that arrives after a
    queued writer waits for that writer, so writers are not starved.
    """

    def __init__(self) -> None:
        self._readers = 0
        self._writer = False
        self._waiters: collections.deque[tuple[bool, asyncio.Future[None]]] = collections.deque()

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def writer_active(self) -> bool:
        return self._writer

    async def acquire_read(self) -> None:
        if not self._writer and not self._waiters:
            self._readers += 1
            return
        await self._wait(exclusive=False)

    async def acquire_write(self) -> None:
        if not self._writer and not self._readers and not self._waiters:
            self._writer = True
            return
        await self._wait(exclusive=True)

    def release_read(self) -> None:
        if self._readers <= 0:
            raise RuntimeError("release_read() without a matching acquire_read()")
        self._readers -= 1
        self._wake()

    def release_write(self) -> None:
        if not self._writer:
            raise RuntimeError("release_write() without a matching acquire_write()")
        self._writer = False
        self._wake()

    @contextlib.asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        await self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextlib.asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        await self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    async def _wait(self, *, exclusive: bool) -> None:
        fut: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        entry = (exclusive, fut)
        self._waiters.append(entry)
        try:
            await fut
        except asyncio.CancelledError:
            if fut.done() and not fut.cancelled():
                # Granted just before the cancellation landed: give it back.
                if exclusive:
                    self.release_write()
                else:
                    self.release_read()
            else:
                if entry in self._waiters:
                    self._waiters.remove(entry)
                self._wake()
            raise

    def _wake(self) -> None:
        while self._waiters and not self._writer:
            exclusive, fut = self._waiters[0]
            if fut.done():
                # Cancelled while queued; its owner is still unwinding.
                self._waiters.popleft()
                continue
            if exclusive:
                if self._readers:
                    return
                self._waiters.popleft()
                self._writer = True
                fut.set_result(None)
                return
            self._waiters.popleft()
            self._readers += 1
            fut.set_result(None)
