from __future__ import annotations

import asyncio

import pytest

from weatherbar.models.geo import GeoFix, Point
from weatherbar.models.station import Station
from weatherbar.state.store import SharedState


def _fix(lat: float, lon: float) -> GeoFix:
    return GeoFix.model_validate({"ip": "203.0.113.7", "city": "Seattle", "latitude": lat, "longitude": lon})


@pytest.mark.asyncio
async def test_set_fix_updates_point() -> None:
    state = SharedState()
    await state.set_fix(_fix(47.6, -122.3))

    assert await state.get_point() == Point(47.6, -122.3)
    assert (await state.get_location()).city == "Seattle"


@pytest.mark.asyncio
async def test_first_commit_reports_no_movement() -> None:
    state = SharedState()
    await state.set_fix(_fix(47.6, -122.3))

    assert await state.commit_location() is False
    assert await state.get_previous_location() == await state.get_location()


@pytest.mark.asyncio
async def test_commit_detects_exact_coordinate_change() -> None:
    state = SharedState()
    await state.set_fix(_fix(47.6, -122.3))
    await state.commit_location()

    await state.set_fix(_fix(47.6, -122.3))
    assert await state.commit_location() is False

    await state.set_fix(_fix(47.6000001, -122.3))
    assert await state.commit_location() is True
    # Previous rolls forward regardless of the outcome.
    assert (await state.get_previous_location()).latitude == 47.6000001
    assert await state.commit_location() is False


@pytest.mark.asyncio
async def test_wait_station_blocks_until_resolved() -> None:
    state = SharedState()
    waiter = asyncio.create_task(state.wait_station())
    await asyncio.sleep(0)
    assert not waiter.done()
    assert not state.station_ready

    await state.set_station(Station("KSEA", 47.44, -122.31))
    assert (await asyncio.wait_for(waiter, timeout=0.1)).identifier == "KSEA"
    assert state.station_ready


@pytest.mark.asyncio
async def test_snapshot_is_consistent() -> None:
    state = SharedState()
    await state.set_fix(_fix(45.5, -122.6))
    await state.commit_location()
    await state.set_station(Station("KPDX", 45.59, -122.6))

    snap = await state.snapshot()

    assert snap.point == Point(45.5, -122.6)
    assert snap.station.identifier == "KPDX"
    assert snap.location == snap.previous_location
