"""
Interactive preview surface.
"""

import logging
from typing import Optional

from PIL import Image

from reflection_tools.api.image import SourceImage
from reflection_tools.api.options import OptionsStore, RenderOptions
from reflection_tools.composite.compositor import render
from reflection_tools.composite.gradient import GradientVector, vectors_for
from reflection_tools.composite.surface import Surface
from reflection_tools.constants import (
    CONTAINER_PADDING,
    DEVICE_PIXEL_RATIO,
    Orientation,
)

logger = logging.getLogger(__name__)


class PreviewSurfaceManager:
    """
    Owns the preview surface and keeps it in sync with the options.

    The surface is ``device_pixel_ratio`` times the container content size
    and is meant to be displayed at ``1 / device_pixel_ratio`` scale. Every
    options change re-renders synchronously.

    Example::

        store = OptionsStore()
        preview = PreviewSurfaceManager(store, image)
        preview.resize(320, 240)
        store.set_opacity(80)
        preview.topil().save('preview.png')

    :param store: :py:class:`~reflection_tools.api.options.OptionsStore`.
    :param image: optional :py:class:`~reflection_tools.api.image.SourceImage`.
    :param device_pixel_ratio: surface pixels per container pixel.
    :param padding: container padding on each side, in container pixels.
    """

    def __init__(
        self,
        store: OptionsStore,
        image: Optional[SourceImage] = None,
        device_pixel_ratio: float = DEVICE_PIXEL_RATIO,
        padding: float = CONTAINER_PADDING,
    ):
        self._store = store
        self._image = image
        self._ratio = device_pixel_ratio
        self._padding = padding
        self._surface: Optional[Surface] = None
        self._gradients: dict[Orientation, GradientVector] = {}
        self._supported = True
        self._unsubscribe = store.subscribe(self._on_change)

    @property
    def supported(self) -> bool:
        """False once a surface could not be allocated."""
        return self._supported

    @property
    def surface(self) -> Optional[Surface]:
        return self._surface

    @property
    def size(self) -> tuple[int, int]:
        """Surface size in pixels, (0, 0) before the first resize."""
        return self._surface.size if self._surface is not None else (0, 0)

    @property
    def display_scale(self) -> float:
        return 1.0 / self._ratio

    @property
    def display_size(self) -> tuple[float, float]:
        width, height = self.size
        return (width * self.display_scale, height * self.display_scale)

    @property
    def gradients(self) -> dict[Orientation, GradientVector]:
        """Gradient vectors of every orientation for the current size."""
        return dict(self._gradients)

    @property
    def options(self) -> RenderOptions:
        return self._store.value

    @property
    def image(self) -> Optional[SourceImage]:
        return self._image

    def set_image(self, image: Optional[SourceImage]) -> None:
        self._image = image
        self.render()

    def resize(self, container_width: float, container_height: float) -> None:
        """Resize to a container and re-render."""
        if not self._supported:
            return
        width = int((container_width - 2 * self._padding) * self._ratio)
        height = int((container_height - 2 * self._padding) * self._ratio)
        if self._surface is not None and self._surface.size == (width, height):
            self.render()
            return
        surface = Surface(width, height)
        if not surface.supported:
            logger.warning("Preview is not supported, rendering disabled")
            self._supported = False
            self._surface = None
            self._gradients = {}
            return
        logger.debug("Preview resized to %dx%d" % surface.size)
        self._surface = surface
        self._gradients = vectors_for(surface.width, surface.height)
        self.render()

    def render(self) -> None:
        """Render the current options into the surface."""
        if not self._supported or self._surface is None or self._image is None:
            return
        options = self._store.value
        render(
            self._surface,
            self._image,
            options,
            vector=self._gradients[options.orientation],
        )

    def topil(self) -> Optional[Image.Image]:
        """The preview as a Pillow RGBA image."""
        if self._surface is None or self._surface.is_empty():
            return None
        return self._surface.topil()

    def dispose(self) -> None:
        """Stop observing the options and drop the surface."""
        self._unsubscribe()
        self._surface = None
        self._gradients = {}
        self._image = None

    def _on_change(self, options: RenderOptions) -> None:
        self.render()
