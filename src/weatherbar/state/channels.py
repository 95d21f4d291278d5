"""Single-slot, overwrite-on-full channels.

Sends never block. A value that has not been consumed yet is replaced
by the next one, so a receiver only ever sees the latest value and
duplicate triggers collapse into one pending trigger.
"""

from __future__ import annotations

import asyncio
from typing import Generic, TypeVar

T = TypeVar("T")


class Mailbox(Generic[T]):
    """Holds at most one item; ``put`` overwrites, ``get`` empties."""

    def __init__(self) -> None:
        self._item: T | None = None
        self._full = False
        self._ready = asyncio.Event()

    @property
    def pending(self) -> bool:
        """Whether an unconsumed item is waiting."""
        return self._full

    def put(self, item: T) -> bool:
        """Store *item*. Returns ``True`` if it displaced an unconsumed item."""
        displaced = self._full
        self._item = item
        self._full = True
        self._ready.set()
        return displaced

    def get_nowait(self) -> T:
        if not self._full:
            raise LookupError("mailbox is empty")
        return self._take()

    async def get(self) -> T:
        """Wait for an item and take it."""
        while not self._full:
            self._ready.clear()
            await self._ready.wait()
        return self._take()

    def _take(self) -> T:
        item = self._item
        self._item = None
        self._full = False
        self._ready.clear()
        return item  # type: ignore[return-value]


class Signal(Mailbox[None]):
    """Coalescing, payload-free trigger."""

    def send(self) -> bool:
        """Raise the signal. Returns ``True`` if one was already pending."""
        return self.put(None)

    async def wait(self) -> None:
        await self.get()
