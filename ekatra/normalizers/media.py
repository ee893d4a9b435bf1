"""
Media normalization.
Turns every image/video representation we have seen in the wild into an
ordered list of MediaDescriptor records.
"""
from typing import Any, Iterable, List, Mapping, Optional
from urllib.parse import urlsplit

from ekatra.logger import logger
from ekatra.models.product import MediaDescriptor
from ekatra.normalizers.fields import FieldResolver, IMAGE_FIELDS, MEDIA_URL_KEYS, is_present

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES_BY_EXTENSION = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "webp": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "mp4": "video/mp4",
    "webm": "video/webm",
}

IMAGE_EXTENSIONS = ("jpg", "jpeg", "webp", "png", "gif", "svg", "bmp", "tif", "tiff", "avif", "heic")
VIDEO_EXTENSIONS = ("mp4", "webm", "mov", "m4v", "avi", "mkv", "m3u8")


class NullMimeProbe:
    """Probe that never looks anything up."""

    def probe(self, url: str) -> Optional[str]:
        return None


def _extension(url: str) -> str:
    path = urlsplit(url.strip()).path.lower()
    last_segment = path.rsplit("/", 1)[-1]
    if "." not in last_segment:
        return ""
    return last_segment.rsplit(".", 1)[-1]


class MediaNormalizer:
    """
    Builds media descriptors for a record.

    The optional ``mime_probe`` is consulted once per URL whose extension
    gives no answer. It must return a MIME type or ``None``.
    """

    def __init__(self, mime_probe=None, image_fields: Iterable[str] = IMAGE_FIELDS,
                 resolver: FieldResolver = None):
        self.mime_probe = mime_probe or NullMimeProbe()
        self.image_fields = tuple(image_fields)
        self.resolver = resolver or FieldResolver()

    def normalize(self, record: Any) -> List[MediaDescriptor]:
        """Collect media from the first recognized image field of ``record``."""
        media_list = []
        for index, (url, declared_mime) in enumerate(self._collect(record)):
            mime_type = self.mime_type(url, declared_mime)
            media_type = self.player_type(mime_type, url)
            media_list.append(MediaDescriptor(
                media_type=media_type,
                play_url=url,
                thumbnail_url=url,
                mime_type=mime_type,
                weight=index,
                duration=0,
                size=0
            ))
        return media_list

    def urls(self, record: Any) -> List[str]:
        return [url for url, _ in self._collect(record)]

    def thumbnail(self, record: Any) -> str:
        """First surviving media URL, or an empty string."""
        urls = self.urls(record)
        return urls[0] if urls else ""

    def mime_type(self, url: str, declared: Optional[str] = None) -> str:
        """Infer a MIME type from the URL suffix, then the declared type, then the probe."""
        mime_type = MIME_TYPES_BY_EXTENSION.get(_extension(url))
        if mime_type:
            return mime_type

        if declared and "/" in declared:
            return declared.strip().lower()

        probed = self.mime_probe.probe(url)
        if probed:
            logger.debug(f"MIME probe resolved {url} as {probed}")
            return probed
        return DEFAULT_MIME_TYPE

    @staticmethod
    def player_type(mime_type: str, url: str = "") -> str:
        mime_type = (mime_type or "").lower()
        if mime_type.startswith("image/"):
            return "IMAGE"
        if mime_type.startswith("video/"):
            return "VIDEO"

        extension = _extension(url)
        if extension in VIDEO_EXTENSIONS or ".mp4" in url.lower():
            return "VIDEO"
        if extension in IMAGE_EXTENSIONS:
            return "IMAGE"
        return "UNKNOWN"

    def _collect(self, record: Any) -> List[tuple]:
        raw = self.resolver.resolve(record, self.image_fields)
        if raw is None:
            return []

        if isinstance(raw, str):
            items = raw.split(",")
        elif isinstance(raw, Mapping):
            items = [raw]
        elif isinstance(raw, (list, tuple)):
            items = raw
        else:
            return []

        collected = []
        for item in items:
            declared = None
            if isinstance(item, Mapping):
                declared = self.resolver.resolve(item, ("mimeType", "mime_type", "mime"))
                item = self.resolver.resolve(item, MEDIA_URL_KEYS)
            if not isinstance(item, str):
                continue
            url = item.strip()
            if is_present(url):
                collected.append((url, declared if isinstance(declared, str) else None))
        return collected
