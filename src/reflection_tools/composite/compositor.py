"""Reflection compositing."""

import logging
from typing import Optional

from reflection_tools.composite.geometry import flip_multipliers, place
from reflection_tools.composite.gradient import GradientVector, erase_stops, vector_for
from reflection_tools.composite.surface import Surface
from reflection_tools.constants import CompositeOp

logger = logging.getLogger(__name__)


def render(
    surface: Surface,
    image,
    options,
    vector: Optional[GradientVector] = None,
) -> None:
    """
    Draw the reflection of the image onto the surface.

    The surface is cleared, the image is drawn flipped, fitted and centered
    at ``options.opacity`` percent, then the alpha is erased by a linear
    gradient running from the reflecting edge (fully erased) to
    ``options.offset`` percent of the surface extent (not erased).

    :param surface: :py:class:`~reflection_tools.composite.surface.Surface`
        to draw into.
    :param image: :py:class:`~reflection_tools.api.image.SourceImage`.
    :param options: :py:class:`~reflection_tools.api.options.RenderOptions`.
    :param vector: gradient vector computed for this surface. Computed from
        the orientation when omitted.
    :raises StaleGradientError: when ``vector`` was computed for another
        surface size.
    :raises UnsupportedSurfaceError: when the surface has no pixels.
    """
    if surface.is_empty() or image is None or 0 in image.size:
        logger.debug("Skip rendering %r with image %r" % (surface, image))
        return

    if vector is None:
        vector = vector_for(options.orientation, surface.width, surface.height)
    vector.check(surface)
    flip = flip_multipliers(options.orientation)
    placement = place(image.width, image.height, surface.width, surface.height)

    with surface.context() as ctx:
        ctx.clear()
        ctx.composite_operation = CompositeOp.SOURCE_OVER
        ctx.global_alpha = options.opacity / 100.0

        ctx.translate(surface.width / 2.0, surface.height / 2.0)
        ctx.scale(flip.horizontal, flip.vertical)
        ctx.scale(placement.scale, placement.scale)
        ctx.draw_image(image.image, -image.width / 2.0, -image.height / 2.0)
        ctx.reset_transform()

        # Opacity applies to the image only, not to the fade.
        ctx.global_alpha = 1.0
        ctx.composite_operation = CompositeOp.DESTINATION_OUT
        ctx.fill_gradient(vector, erase_stops(options.offset / 100.0))
