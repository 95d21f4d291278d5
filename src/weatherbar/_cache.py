"""On-disk cache for the NOAA station list."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

_logger = logging.getLogger(__name__)


class StationListCache:
    """Stores the raw station index document on disk.

    File access runs in a worker thread so the event loop keeps ticking
    while the (roughly megabyte sized) document is read or written.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> bytes | None:
        try:
            return self._path.read_bytes()
        except FileNotFoundError:
            return None

    def _write(self, data: bytes) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_bytes(data)
        os.replace(tmp, self._path)

    async def read(self) -> bytes | None:
        """Cached document, or ``None`` when nothing is cached."""
        data = await asyncio.to_thread(self._read)
        if data is not None:
            _logger.debug("Read %d bytes of station list from %s", len(data), self._path)
        return data

    async def write(self, data: bytes) -> None:
        await asyncio.to_thread(self._write, data)
        _logger.debug("Cached %d bytes of station list at %s", len(data), self._path)
