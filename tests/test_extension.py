"""
Tests for the IPython extension entry points
"""
import asyncio
import importlib
import logging
from unittest.mock import AsyncMock, Mock, patch

import pytest

import apod_panel
from apod_panel import extension
from apod_panel.config import DEMO_API_KEY


@pytest.fixture(autouse=True)
def reset_extension(config):
    extension.apod_config = config
    extension.panel = None
    yield
    extension.panel = None
    extension.apod_config = None


def test_load_registers_magic():
    ipython = Mock()

    apod_panel.load_ipython_extension(ipython)

    ipython.register_magic_function.assert_called_once_with(
        extension.apod_magic, magic_kind="line", magic_name="apod"
    )


def test_open_creates_panel_once():
    display = Mock()

    with patch.object(extension.APODWidget, "request_refresh") as refresh:
        first = extension.open_apod(display)
        second = extension.open_apod(display)

    assert first is second
    display.assert_called_once_with(first)
    assert refresh.call_count == 2


def test_open_replaces_closed_panel():
    display = Mock()

    with patch.object(extension.APODWidget, "request_refresh"):
        first = extension.open_apod(display)
        first.close()
        second = extension.open_apod(display)

    assert second is not first
    assert display.call_count == 2


def test_magic_opens_panel():
    with patch.object(extension, "open_apod") as open_apod:
        extension.apod_magic("")

    open_apod.assert_called_once_with()


def test_magic_stores_key(config):
    extension.apod_magic("key abc123")

    assert config.api_key == "abc123"


def test_magic_empty_key_means_demo_key(config):
    extension.apod_magic("key")

    assert config.api_key == DEMO_API_KEY


def test_magic_unknown_arguments_do_nothing():
    with patch.object(extension, "open_apod") as open_apod:
        extension.apod_magic("bogus")

    open_apod.assert_not_called()


def test_unload_closes_panel_and_client():
    with patch.object(extension.APODWidget, "request_refresh"):
        panel = extension.open_apod(Mock())
    panel._client = Mock(close=AsyncMock())

    apod_panel.unload_ipython_extension(Mock())

    assert panel.is_disposed
    panel.client.close.assert_awaited_once()
    assert extension.panel is None


@pytest.mark.asyncio
async def test_unload_in_running_loop_keeps_close_task():
    with patch.object(extension.APODWidget, "request_refresh"):
        panel = extension.open_apod(Mock())
    panel._client = Mock(close=AsyncMock())

    apod_panel.unload_ipython_extension(Mock())

    assert len(extension._cleanup_tasks) == 1
    await asyncio.gather(*extension._cleanup_tasks)
    await asyncio.sleep(0)

    panel.client.close.assert_awaited_once()
    assert not extension._cleanup_tasks


def test_import_leaves_aiohttp_logging_alone():
    logger = logging.getLogger("aiohttp")
    logger.setLevel(logging.DEBUG)
    try:
        importlib.reload(extension)
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(logging.NOTSET)
