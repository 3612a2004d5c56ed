"""
Source image decoding and asynchronous loading.
"""

import asyncio
import io
import logging
import os
from typing import Awaitable, Callable, Optional
from urllib.parse import unquote, urlparse

from attrs import define, field
from PIL import Image, UnidentifiedImageError

from reflection_tools.api import pil_io
from reflection_tools.exceptions import AssetDecodeError, AssetError, AssetFetchError

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[bytes]]


def _to_rgba(image: Image.Image) -> Image.Image:
    image.load()
    converted = pil_io.post_process(image)
    # Detach from the caller's image, which may be closed afterwards.
    return image.copy() if converted is image else converted


@define(frozen=True)
class SourceImage:
    """
    Decoded raster in RGBA mode.

    Example::

        from reflection_tools.api.image import SourceImage

        image = SourceImage.open('photo.jpg')
        print(image.size)

    .. py:attribute:: image

        Pillow image, always RGBA.
    """

    image: Image.Image = field(converter=_to_rgba, eq=False)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    @classmethod
    def open(cls, fp) -> "SourceImage":
        """Open an image file or file-like object."""
        try:
            with Image.open(fp) as image:
                return cls(image)
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
            ValueError,
        ) as e:
            raise AssetDecodeError("Cannot decode image: %s" % e) from e

    @classmethod
    def frombytes(cls, data: bytes) -> "SourceImage":
        """Decode encoded image bytes (PNG, JPEG, ...)."""
        return cls.open(io.BytesIO(data))

    def __repr__(self) -> str:
        return "%s(size=%dx%d)" % (self.__class__.__name__, self.width, self.height)


class LivenessToken:
    """Flag checked by asynchronous completions before touching state."""

    def __init__(self) -> None:
        self._alive = True

    @property
    def alive(self) -> bool:
        return self._alive

    def revoke(self) -> None:
        self._alive = False


async def read_url(url: str) -> bytes:
    """
    Default fetcher: reads ``data:`` URLs, ``file:`` URLs and local paths.

    Network retrieval is left to the host, which may pass its own fetcher.
    """
    parsed = urlparse(url)
    try:
        if parsed.scheme == "data":
            return pil_io.from_data_url(url)
        if parsed.scheme == "file":
            path = unquote(parsed.path)
        elif parsed.scheme == "" or os.path.exists(url):
            path = url
        else:
            raise AssetFetchError("Unsupported URL scheme: %s" % parsed.scheme)
        return await asyncio.to_thread(_read_file, path)
    except (OSError, ValueError) as e:
        raise AssetFetchError("Cannot read %s: %s" % (url[:64], e)) from e


def _read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


async def load_image(
    url: str,
    fetcher: Fetcher = read_url,
    token: Optional[LivenessToken] = None,
) -> Optional[SourceImage]:
    """
    Fetch and decode an image.

    Decoding runs in a worker thread. Returns ``None`` when ``token`` was
    revoked before completion.

    :raises AssetFetchError: if fetching fails.
    :raises AssetDecodeError: if the data is not an image.
    """
    try:
        data = await fetcher(url)
    except AssetError:
        raise
    except Exception as e:
        raise AssetFetchError("Cannot fetch %s: %s" % (url[:64], e)) from e
    if token is not None and not token.alive:
        logger.debug("Load of %s cancelled after fetch" % url[:64])
        return None
    image = await asyncio.to_thread(SourceImage.frombytes, data)
    if token is not None and not token.alive:
        logger.debug("Load of %s cancelled after decode" % url[:64])
        return None
    logger.debug("Loaded %r from %s" % (image, url[:64]))
    return image
