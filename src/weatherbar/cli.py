"""Command line entry point: ``noaa-weather-bar [--config PATH] [--debug]``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from collections.abc import Sequence
from pathlib import Path

from weatherbar.config import WeatherBarConfig, default_config_path
from weatherbar.exceptions import WeatherBarConfigError, WeatherBarStartupError
from weatherbar.scheduler import WeatherBar

_logger = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="noaa-weather-bar",
        description="Print the current weather at the nearest station, one line per update.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=default_config_path(),
        help="Path to the config file (default: %(default)s)",
    )
    parser.add_argument("--debug", action="store_true", help="Turn on debugging output")
    return parser.parse_args(argv)


async def _run(config: WeatherBarConfig) -> None:
    async with WeatherBar(config) as bar:
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(signum, bar.stop)
        try:
            await bar.run()
        finally:
            for signum in (signal.SIGINT, signal.SIGTERM):
                loop.remove_signal_handler(signum)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = WeatherBarConfig.from_file(args.config)
    except WeatherBarConfigError as exc:
        print(f"Error reading config file. Did you pass --config? Run with -h for help.\n{exc}", file=sys.stderr)
        return 2

    try:
        asyncio.run(_run(config))
    except WeatherBarStartupError as exc:
        _logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
