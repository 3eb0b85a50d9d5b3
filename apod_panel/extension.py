"""
IPython extension entry points for the Astronomy Picture panel.

Load with ``%load_ext apod_panel``; then ``%apod`` opens the panel and
shows a new random picture, ``%apod key <KEY>`` stores a NASA API key.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import asyncio
import logging
from typing import Callable, Optional, Set

from apod_panel.config import DEMO_API_KEY, Config
from apod_panel.widget import APODWidget

_LOG = logging.getLogger(__name__)

COMMAND = "apod"
COMMAND_LABEL = "Random Astronomy Picture"

apod_config: Optional[Config] = None
panel: Optional[APODWidget] = None
_cleanup_tasks: Set[asyncio.Task] = set()


def _get_config() -> Config:
    global apod_config
    if apod_config is None:
        apod_config = Config()
    return apod_config


def open_apod(display: Optional[Callable[[object], None]] = None) -> APODWidget:
    """
    Show the panel and load a new picture into it.

    The panel is created on first use and again after it has been closed.
    """
    global panel

    if panel is None or panel.is_disposed:
        panel = APODWidget(_get_config())
        _LOG.info("Created panel %s (%s)", _get_config().panel_id, _get_config().panel_title)
        if display is None:
            from IPython.display import display
        display(panel)

    panel.request_refresh()
    return panel


def set_api_key(api_key: str) -> None:
    """Store the NASA API key; an empty key means DEMO_KEY."""
    _get_config().update({"api_key": api_key.strip() or DEMO_API_KEY})
    _LOG.info("NASA API key updated")


def apod_magic(line: str = ""):
    """%apod [key <KEY>]"""
    args = line.split()
    if args and args[0] == "key":
        set_api_key(args[1] if len(args) > 1 else "")
        return None
    if args:
        _LOG.warning("Unknown %%apod arguments: %s", line)
        return None
    open_apod()
    return None


def load_ipython_extension(ipython) -> None:
    """Register the %apod magic."""
    ipython.register_magic_function(apod_magic, magic_kind="line", magic_name=COMMAND)
    _LOG.info("APOD panel extension is activated! \"%s\" is available as %%%s", COMMAND_LABEL, COMMAND)


def unload_ipython_extension(ipython) -> None:
    """Close the panel and its HTTP session."""
    global panel

    if panel is not None and not panel.is_disposed:
        client = panel.client
        panel.close()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(client.close())
        else:
            task = loop.create_task(client.close())
            _cleanup_tasks.add(task)
            task.add_done_callback(_cleanup_tasks.discard)
    panel = None
    _LOG.info("APOD panel extension unloaded")
