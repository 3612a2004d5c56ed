"""
Full-resolution output of a reflection.
"""

import logging
from typing import Any, Optional

from attrs import define, field
from PIL import Image

from reflection_tools.api import pil_io
from reflection_tools.api.image import SourceImage
from reflection_tools.api.options import RenderOptions
from reflection_tools.composite.compositor import render
from reflection_tools.composite.geometry import fit
from reflection_tools.composite.gradient import rescale, vector_for
from reflection_tools.composite.surface import Surface
from reflection_tools.constants import EXPORT_FORMAT
from reflection_tools.exceptions import UnsupportedSurfaceError
from reflection_tools.validators import range_

logger = logging.getLogger(__name__)


@define(frozen=True)
class ExportPayload:
    """
    Serialized output handed to the document-insertion collaborator.

    .. py:attribute:: data_url

        ``data:image/png;base64,...`` encoded image.

    .. py:attribute:: width
    .. py:attribute:: height

        Pixel size of the encoded image, equal to the source image size.
    """

    data_url: str = field(repr=lambda value: value[:32] + "...")
    width: int = field(validator=range_(1, 2**31 - 1))
    height: int = field(validator=range_(1, 2**31 - 1))
    type: str = "image"

    def asdict(self) -> dict[str, Any]:
        """Element description for the host document."""
        return {"type": self.type, "dataUrl": self.data_url}


class OutputSurfaceManager:
    """
    Renders a reflection at the resolution of the source image.

    The working surface keeps the aspect ratio of the reference (preview)
    surface, scaled to the source image's pixel density. It is then
    letterboxed into a surface of exactly the image size.

    :param format: Pillow format of the payload, PNG by default.
    """

    def __init__(self, format: str = EXPORT_FORMAT):
        self.format = format

    def working_size(
        self, image: SourceImage, reference: tuple[int, int]
    ) -> tuple[int, int]:
        """Size of the working surface for the reference surface size."""
        scale = fit(image.width, image.height, reference[0], reference[1])
        return (
            int(round(reference[0] / scale)),
            int(round(reference[1] / scale)),
        )

    def render(
        self,
        image: SourceImage,
        options: RenderOptions,
        reference: tuple[int, int],
    ) -> Image.Image:
        """
        Render the reflection into an image of the source image's size.

        :param image: source image.
        :param options: render options.
        :param reference: size of the preview surface in pixels.
        :raises UnsupportedSurfaceError: if a surface cannot be allocated.
        """
        working = Surface(*self.working_size(image, reference))
        vector = rescale(
            vector_for(options.orientation, reference[0], reference[1]),
            working.width,
            working.height,
        )
        render(working, image, options, vector=vector)
        logger.debug("Rendered %r for reference %dx%d" % (working, *reference))

        output = Surface(image.width, image.height)
        with output.context() as ctx:
            ctx.clear()
            ctx.draw_surface(
                working,
                (output.width - working.width) / 2.0,
                (output.height - working.height) / 2.0,
            )
        return output.topil()

    def commit(
        self,
        image: Optional[SourceImage],
        options: RenderOptions,
        reference: tuple[int, int],
    ) -> Optional[ExportPayload]:
        """
        Render and serialize the reflection.

        Returns ``None`` when there is nothing to export: no image, an empty
        reference surface, or no drawing context.
        """
        if image is None:
            logger.warning("Nothing to export: no image")
            return None
        if min(reference) <= 0:
            logger.warning("Nothing to export: empty reference %dx%d" % reference)
            return None
        try:
            result = self.render(image, options, reference)
        except UnsupportedSurfaceError as e:
            logger.warning("Nothing to export: %s" % e)
            return None
        data_url = pil_io.to_data_url(result, self.format)
        logger.info("Exported %dx%d reflection" % result.size)
        return ExportPayload(data_url, result.width, result.height)
