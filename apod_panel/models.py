"""
APOD record and the render target it is drawn onto.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

_LOG = logging.getLogger(__name__)

NOT_AN_IMAGE_CAPTION = "Random APOD fetched was not an image."


@dataclass(frozen=True)
class APODRecord:
    """One Astronomy Picture of the Day entry as returned by NASA."""

    date: str
    title: str
    explanation: str
    media_type: str
    url: str
    copyright: Optional[str] = None
    hdurl: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "APODRecord":
        """Build a record from the decoded response body."""
        return cls(
            date=data.get("date") or "",
            title=data.get("title") or "",
            explanation=data.get("explanation") or "",
            media_type=data.get("media_type") or "",
            url=data.get("url") or "",
            copyright=data.get("copyright") or None,
            hdurl=data.get("hdurl") or None,
        )

    @property
    def is_image(self) -> bool:
        return self.media_type == "image"


def caption_for(record: APODRecord) -> str:
    """Caption shown under an image record."""
    caption = record.title
    if record.copyright:
        caption += f" (Copyright {record.copyright})"
    return caption


class ImageSlot:
    """Image reference with its accessible label."""

    def __init__(self):
        self.src = ""
        self.title = ""


class RenderTarget:
    """Image slot and caption text written together by each completed fetch."""

    def __init__(self):
        self.img = ImageSlot()
        self.summary = ""

    def show_record(self, record: APODRecord) -> None:
        """Render a successfully fetched record."""
        if record.is_image:
            self.img.src = record.url
            self.img.title = record.title
            self.summary = caption_for(record)
        else:
            _LOG.info("APOD for %s is a %s, leaving image as is", record.date, record.media_type or "non-image")
            self.summary = NOT_AN_IMAGE_CAPTION

    def show_error(self, message: str) -> None:
        """Render a failed fetch; the image slot keeps its last value."""
        self.summary = message
