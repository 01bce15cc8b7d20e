"""Remote image URL → EncodedImage, fetched through a CORS-capable proxy.

The proxy (images.weserv.nl by default) expects the target URL without its
scheme, e.g. ``?url=i.pinimg.com/originals/ab/cd.jpg``.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import quote

import httpx

from designirl.clients.http import borrow_client
from designirl.config import settings
from designirl.errors import FetchFailure
from designirl.models.domain import EncodedImage

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_DEFAULT_MIME = "image/jpeg"


def proxy_url(url: str) -> str:
    stripped = _SCHEME_RE.sub("", url)
    return f"{settings.image_proxy_url}?url={quote(stripped, safe='')}"


async def fetch_encoded_image(url: str, client: httpx.AsyncClient | None = None) -> EncodedImage:
    """Download ``url`` through the image proxy. Raises FetchFailure on any error."""
    target = proxy_url(url)
    async with borrow_client(client) as http:
        try:
            response = await http.get(target)
        except httpx.HTTPError as e:
            logger.warning("Image fetch failed for %s: %s", url, e)
            raise FetchFailure(f"Failed to fetch image via proxy: {e}") from e

    if not response.is_success:
        raise FetchFailure(f"Failed to fetch image via proxy: {response.reason_phrase or response.status_code}")

    mime_type = response.headers.get("content-type", "").split(";")[0].strip() or _DEFAULT_MIME
    return EncodedImage(data=response.content, mime_type=mime_type)
