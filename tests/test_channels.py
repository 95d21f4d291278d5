from __future__ import annotations

import asyncio

import pytest

from weatherbar.state.channels import Mailbox, Signal


@pytest.mark.asyncio
async def test_signals_coalesce_before_drain() -> None:
    signal = Signal()

    assert signal.send() is False
    assert signal.send() is True

    await asyncio.wait_for(signal.wait(), timeout=0.1)
    assert not signal.pending
    with pytest.raises(TimeoutError):
        await asyncio.wait_for(signal.wait(), timeout=0.05)


@pytest.mark.asyncio
async def test_mailbox_keeps_latest() -> None:
    mailbox: Mailbox[int] = Mailbox()
    mailbox.put(1)
    assert mailbox.put(2) is True

    assert await mailbox.get() == 2
    assert not mailbox.pending


@pytest.mark.asyncio
async def test_get_waits_for_put() -> None:
    mailbox: Mailbox[str] = Mailbox()
    getter = asyncio.create_task(mailbox.get())
    await asyncio.sleep(0)
    assert not getter.done()

    mailbox.put("obs")
    assert await asyncio.wait_for(getter, timeout=0.1) == "obs"


@pytest.mark.asyncio
async def test_cancelled_get_does_not_consume() -> None:
    mailbox: Mailbox[str] = Mailbox()
    getter = asyncio.create_task(mailbox.get())
    await asyncio.sleep(0)
    getter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await getter

    mailbox.put("later")
    assert mailbox.get_nowait() == "later"


def test_get_nowait_on_empty() -> None:
    with pytest.raises(LookupError):
        Mailbox[int]().get_nowait()
