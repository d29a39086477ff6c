"""CDN URL resolver for hosted preview videos.

Stored ``videoUrl`` values are storage-bucket references such as
``https://firebasestorage.googleapis.com/v0/b/<bucket>/o/videos%2Fhero.mp4?alt=media``.
At read time they are rewritten to the public delivery host:
``https://cdn.gridrr.com/videos/hero.mp4``.
"""

import logging
import re
from urllib.parse import quote, unquote

from app.config import settings

logger = logging.getLogger(__name__)

_VIDEO_PATH = re.compile(r"videos(?:%2F|/)([^?]+)")

# encodeURIComponent leaves these unescaped in addition to quote()'s defaults
_URI_COMPONENT_SAFE = "!*'()"


class CdnResolver:
    """Maps media references to delivery URLs. Never raises."""

    def __init__(self, host: str | None = None):
        self.host = host or settings.cdn_host

    @property
    def base_url(self) -> str:
        return f"https://{self.host}/videos/"

    def resolve(self, ref: str | None) -> str:
        if not ref:
            return ""
        if self.host in ref:
            return ref

        try:
            decoded = unquote(ref, errors="strict")
        except UnicodeDecodeError:
            logger.warning("Malformed media reference (undecodable) | ref=%s", ref[:200])
            return ref

        match = _VIDEO_PATH.search(decoded)
        if not match or not match.group(1):
            logger.warning("Malformed media reference (no videos/ segment) | ref=%s", ref[:200])
            return ref

        return self.base_url + quote(match.group(1), safe=_URI_COMPONENT_SAFE)

    __call__ = resolve

