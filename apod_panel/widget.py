"""
Astronomy Picture panel widget.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import asyncio
import html
import logging
from typing import Optional, Set

import ipywidgets as widgets

from apod_panel.client import APODClient, APODError, random_date
from apod_panel.config import Config
from apod_panel.models import RenderTarget

_LOG = logging.getLogger(__name__)


class APODWidget(widgets.VBox):
    """Panel with an image and a caption; every refresh shows the APOD of a random date."""

    def __init__(self, config: Config, client: Optional[APODClient] = None, **kwargs):
        """Initialize the APOD panel."""
        self._config = config
        self._client = client or APODClient(config)
        self._target = RenderTarget()
        self._request_seq = 0
        self._refresh_tasks: Set[asyncio.Task] = set()
        self._disposed = False

        self.heading = widgets.HTML(value=f"<h3>{html.escape(config.panel_title)}</h3>")
        self.image = widgets.HTML(value="")
        self.caption = widgets.Label(value="")

        super().__init__(children=[self.heading, self.image, self.caption], **kwargs)
        self.add_class("my-apodWidget")
        self.add_class(config.panel_id)

    @property
    def render_target(self) -> RenderTarget:
        return self._target

    @property
    def client(self) -> APODClient:
        return self._client

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    async def refresh(self) -> None:
        """Fetch the APOD of a random date and render it."""
        self._request_seq += 1
        seq = self._request_seq
        date = random_date()

        try:
            record = await self._client.fetch_apod(date)
        except APODError as ex:
            if seq != self._request_seq:
                _LOG.debug("Discarding stale APOD error for %s", date)
                return
            _LOG.warning("APOD refresh failed: %s", ex)
            self._target.show_error(str(ex))
        else:
            if seq != self._request_seq:
                _LOG.debug("Discarding stale APOD for %s", date)
                return
            self._target.show_record(record)

        self._sync_view()

    def request_refresh(self) -> Optional[asyncio.Task]:
        """
        Start refresh() without waiting for it.

        Inside a running event loop (a Jupyter kernel) the refresh becomes a task.
        Without one it runs to completion and the HTTP session is closed afterwards.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._refresh_and_close())
            return None

        task = loop.create_task(self.refresh())
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)
        return task

    async def _refresh_and_close(self) -> None:
        try:
            await self.refresh()
        finally:
            await self._client.close()

    def _sync_view(self) -> None:
        """Mirror the render target into the child widgets."""
        img = self._target.img
        if img.src:
            self.image.value = (
                f'<img src="{html.escape(img.src)}" title="{html.escape(img.title)}" '
                f'alt="{html.escape(img.title)}" style="max-width:100%;">'
            )
        else:
            self.image.value = ""
        self.caption.value = self._target.summary

    def close(self):
        """Dispose of the panel and cancel refreshes still in flight."""
        _LOG.debug("Closing APOD panel")
        for task in list(self._refresh_tasks):
            if not task.done():
                task.cancel()
        self._refresh_tasks.clear()
        self._disposed = True
        self.image.close()
        self.heading.close()
        self.caption.close()
        super().close()
