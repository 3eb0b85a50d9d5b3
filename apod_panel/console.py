#!/usr/bin/env python3
"""
Fetch one random Astronomy Picture from the command line.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""
import asyncio
import logging
import sys

from apod_panel.client import APODClient, APODError, random_date
from apod_panel.config import Config
from apod_panel.models import RenderTarget

_LOG = logging.getLogger(__name__)


async def fetch_random(config: Config) -> RenderTarget:
    """Render the APOD of a random date into a fresh render target."""
    target = RenderTarget()
    async with APODClient(config) as client:
        try:
            target.show_record(await client.fetch_apod(random_date()))
        except APODError as ex:
            target.show_error(str(ex))
    return target


def main() -> None:
    """Main entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)8s | %(name)s | %(message)s"
    )
    logging.getLogger("aiohttp").setLevel(logging.WARNING)

    try:
        target = asyncio.run(fetch_random(Config()))
    except KeyboardInterrupt:
        _LOG.info("Stopped by user")
        sys.exit(1)

    if target.img.src:
        print(target.img.src)
    print(target.summary)
