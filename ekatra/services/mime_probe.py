"""
HTTP content-type probe for media URLs without a recognizable extension.
All network logic is isolated here; failures only ever mean "don't know".
"""
import asyncio
from typing import Optional

import aiohttp

from ekatra.config import config
from ekatra.logger import logger


class HttpMimeProbe:
    """
    Asks the media host for a Content-Type with a single HEAD request.

    The engine is synchronous, so ``probe`` drives the request on its own
    event loop and declines (returns ``None``) when called from inside a
    running loop.
    """

    def __init__(self, timeout: float = None):
        self.timeout = timeout or config.MIME_PROBE_TIMEOUT

    async def fetch_content_type(self, url: str) -> Optional[str]:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
            async with session.head(url, allow_redirects=True) as response:
                content_type = response.headers.get("Content-Type", "")

        mime_type = content_type.split(";")[0].strip().lower()
        return mime_type or None

    def probe(self, url: str) -> Optional[str]:
        if not isinstance(url, str) or not url.lower().startswith(("http://", "https://")):
            return None

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            logger.debug(f"Skipping MIME probe for {url}: called inside a running event loop")
            return None

        try:
            return asyncio.run(self.fetch_content_type(url))
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.debug(f"MIME probe failed for {url}: {e}")
            return None
