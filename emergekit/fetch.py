"""Fetching raw data and images from URLs.

Images are decoded with Pillow. GIFs are not decoded locally: they are sent
to a conversion service, and the image it returns is used instead.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import requests
from PIL import Image, UnidentifiedImageError

__all__ = [
    "FetchError",
    "FetchedData",
    "TextureFetcher",
    "get_data_from_url",
    "is_gif",
    "build_gif_upload_body",
]

logger = logging.getLogger(__name__)

_TIMEOUT = 60.0
_BOUNDARY = "EmergenceBoundary"
_GIF_SIGNATURE = b"GIF"


class FetchError(Exception):
    """A URL could not be fetched or its content could not be used."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class FetchedData:
    """The body of a response, as bytes and as text."""

    data: bytes
    text: str


@contextmanager
def _session_scope(session: requests.Session | None) -> Iterator[requests.Session]:
    if session is not None:
        yield session
        return
    with requests.Session() as own:
        yield own


def _checked(response: requests.Response, url: str) -> requests.Response:
    if not response.ok:
        raise FetchError(
            f"request to {url} returned {response.status_code}",
            status_code=response.status_code,
        )
    return response


def _get(session: requests.Session, url: str) -> requests.Response:
    try:
        response = session.get(url, timeout=_TIMEOUT)
    except requests.RequestException as exc:
        raise FetchError(f"request to {url} failed: {exc}") from exc
    return _checked(response, url)


def get_data_from_url(
    url: str, session: requests.Session | None = None
) -> FetchedData:
    """Fetch ``url`` and return its body; raises ``FetchError`` on failure."""
    logger.info("Getting data from %s", url)
    with _session_scope(session) as http:
        response = _get(http, url)
    return FetchedData(data=response.content, text=response.text)


def is_gif(data: bytes) -> bool:
    """Return whether ``data`` starts with the GIF signature."""
    return bytes(data[:3]) == _GIF_SIGNATURE


def build_gif_upload_body(gif_bytes: bytes) -> bytes:
    """Build the multipart form body that uploads a GIF for conversion."""
    head = (
        f"\r\n--{_BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="file";  filename="gif.gif"\r\n'
        "Content-Type: image/gif\r\n\r\n"
    ).encode("utf-8")
    tail = f"\r\n--{_BOUNDARY}--\r\n".encode("utf-8")
    return head + bytes(gif_bytes) + tail


def _decode_image(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise FetchError(f"content is not a usable image: {exc}") from exc
    return image


class TextureFetcher:
    """Fetches images from URLs and keeps the decoded images in a cache.

    ``gif_conversion_url`` is the endpoint that turns an uploaded GIF into
    another image format. Without it, GIFs cannot be fetched.
    """

    def __init__(
        self,
        gif_conversion_url: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.gif_conversion_url = gif_conversion_url
        self._session = session
        self._cache: dict[str, Image.Image] = {}

    def fetch(self, url: str, allow_cache: bool = True) -> Image.Image:
        """Return the image at ``url``, from the cache if allowed and present.

        PNG and JPEG images are decoded directly; GIFs go through the
        conversion service. Raises ``FetchError`` on any failure.
        """
        if allow_cache and url in self._cache:
            logger.info("Found %s in the image cache", url)
            return self._cache[url]

        with _session_scope(self._session) as http:
            content = _get(http, url).content
            if content and is_gif(content):
                logger.info("Found a GIF at %s, sending it for conversion", url)
                content = self._convert_gif(http, content)

        image = _decode_image(content)
        self._cache[url] = image
        return image

    def _convert_gif(self, session: requests.Session, gif_bytes: bytes) -> bytes:
        if not self.gif_conversion_url:
            raise FetchError("GIF images need a conversion service")
        url = self.gif_conversion_url
        headers = {
            "Content-Type": f"multipart/form-data; boundary={_BOUNDARY}",
            "accept": "*/*",
        }
        try:
            response = session.post(
                url,
                data=build_gif_upload_body(gif_bytes),
                headers=headers,
                timeout=_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise FetchError(f"GIF conversion request failed: {exc}") from exc
        return _checked(response, url).content

    def clear_cache(self) -> None:
        """Forget every cached image."""
        self._cache.clear()

    def __contains__(self, url: object) -> bool:
        return url in self._cache