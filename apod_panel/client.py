"""
NASA APOD API client.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import asyncio
import json
import logging
import random
import ssl
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Callable, Optional
from urllib.parse import urlencode

import aiohttp
import certifi

from apod_panel.config import APOD_START_DATE, Config
from apod_panel.models import APODRecord

_LOG = logging.getLogger(__name__)

APOD_URL = "https://api.nasa.gov/planetary/apod"

_START = datetime.strptime(APOD_START_DATE, "%Y-%m-%d").replace(tzinfo=timezone.utc)


class APODError(Exception):
    """Base error for APOD fetches. str() is the text shown to the user."""


class APODRequestError(APODError):
    """NASA answered with a non-2xx status."""

    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.status = status


class APODResponseError(APODError):
    """NASA answered 2xx but the body is not an APOD object."""


class APODConnectionError(APODError):
    """No HTTP status was obtained."""


def random_date(rng: Callable[[], float] = random.random, now: Optional[datetime] = None) -> str:
    """
    Pick a random APOD date between 2010-02-01 and now.

    Uniform over the timestamp span rather than over calendar days.
    A naive ``now`` is taken as UTC.
    """
    end = now or datetime.now(timezone.utc)
    if end.tzinfo is None:
        end = end.replace(tzinfo=timezone.utc)
    start_ts = _START.timestamp()
    picked = start_ts + rng() * (end.timestamp() - start_ts)
    return datetime.fromtimestamp(picked, tz=timezone.utc).strftime("%Y-%m-%d")


def _error_message(body: Any) -> Optional[str]:
    """Return error.message from an error body, if it has one."""
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if not isinstance(error, dict):
        return None
    message = error.get("message")
    if isinstance(message, str) and message:
        return message
    return None


def _reason_phrase(response: aiohttp.ClientResponse) -> str:
    if response.reason:
        return response.reason
    try:
        return HTTPStatus(response.status).phrase
    except ValueError:
        return f"HTTP {response.status}"


class APODClient:
    """Single-request client for the APOD endpoint. No caching, no retries."""

    def __init__(self, config: Config):
        """Initialize APOD client."""
        self._config = config
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> None:
        """Ensure aiohttp session exists."""
        if self._session is None or self._session.closed:
            ssl_context = ssl.create_default_context(cafile=certifi.where())

            connector = aiohttp.TCPConnector(
                ssl=ssl_context,
                limit=4,
                ttl_dns_cache=300
            )

            timeout = aiohttp.ClientTimeout(
                total=15,
                connect=5,
                sock_read=10
            )

            self._session = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector
            )

            _LOG.info("APOD HTTP session created with SSL verification")

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def build_url(self, date: str) -> str:
        """Request URL for the APOD of the given YYYY-MM-DD date."""
        return f"{APOD_URL}?{urlencode({'api_key': self._config.api_key, 'date': date})}"

    async def fetch_apod(self, date: str) -> APODRecord:
        """
        Fetch the APOD for one date.

        :param date: YYYY-MM-DD
        :return: the record NASA returned
        :raises APODRequestError: non-2xx answer
        :raises APODResponseError: 2xx answer that is not an APOD object
        :raises APODConnectionError: no answer at all
        """
        await self._ensure_session()
        url = self.build_url(date)
        _LOG.debug("Fetching APOD for %s", date)

        try:
            async with self._session.get(url) as response:
                _LOG.debug("Response: HTTP %s for APOD %s", response.status, date)
                raw = await response.read()

                if not 200 <= response.status < 300:
                    try:
                        body = json.loads(raw)
                    except ValueError:
                        body = None
                    message = _error_message(body) or _reason_phrase(response)
                    _LOG.warning("APOD request for %s failed with HTTP %s: %s", date, response.status, message)
                    raise APODRequestError(message, response.status)

        except asyncio.TimeoutError as ex:
            _LOG.warning("Timeout fetching APOD for %s", date)
            raise APODConnectionError("Request to NASA timed out") from ex
        except aiohttp.ClientError as ex:
            _LOG.warning("Connection error fetching APOD for %s: %s", date, ex)
            raise APODConnectionError(f"Unable to reach NASA: {ex}") from ex

        try:
            data = json.loads(raw)
        except ValueError as ex:
            _LOG.error("Invalid JSON for APOD %s: %s", date, raw[:100])
            raise APODResponseError("Invalid response from NASA") from ex

        if not isinstance(data, dict):
            _LOG.error("Unexpected APOD body for %s: %s", date, raw[:100])
            raise APODResponseError("Invalid response from NASA")

        record = APODRecord.from_json(data)
        _LOG.info("APOD fetched: %s (%s, %s)", record.title[:40], record.date, record.media_type)
        return record
