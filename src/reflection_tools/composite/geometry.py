"""
Geometry of the reflection: fit scaling, placement and flip multipliers.
"""

import logging

from attrs import define, field

from reflection_tools.constants import Orientation
from reflection_tools.exceptions import GeometryError
from reflection_tools.validators import in_

logger = logging.getLogger(__name__)


@define(frozen=True)
class FlipMultipliers:
    """
    Sign pair applied to the x and y axes when drawing the reflection.

    .. py:attribute:: horizontal

        ``1`` or ``-1``.

    .. py:attribute:: vertical

        ``1`` or ``-1``.
    """

    horizontal: int = field(default=1, validator=in_((1, -1)))
    vertical: int = field(default=1, validator=in_((1, -1)))

    def __iter__(self):
        yield self.horizontal
        yield self.vertical


_VERTICAL_FLIP = FlipMultipliers(1, -1)
_HORIZONTAL_FLIP = FlipMultipliers(-1, 1)


def flip_multipliers(orientation: Orientation) -> FlipMultipliers:
    """Return the flip multipliers of the given orientation."""
    orientation = Orientation.parse(orientation)
    if orientation in (Orientation.ABOVE, Orientation.BELOW):
        return _VERTICAL_FLIP
    if orientation in (Orientation.LEFT, Orientation.RIGHT):
        return _HORIZONTAL_FLIP
    raise AssertionError("Unhandled orientation: %r" % orientation)


def fit(image_w: float, image_h: float, surface_w: float, surface_h: float) -> float:
    """
    Uniform scale that fits the image inside the surface.

    The image is width-constrained when it is relatively wider than the
    surface, height-constrained otherwise.

    :raises GeometryError: for a zero-area image or surface.
    """
    if min(image_w, image_h, surface_w, surface_h) <= 0:
        raise GeometryError(
            "Cannot fit %gx%g image into %gx%g surface"
            % (image_w, image_h, surface_w, surface_h)
        )
    image_ratio = image_w / image_h
    surface_ratio = surface_w / surface_h
    if image_ratio > surface_ratio:
        return surface_w / image_w
    return surface_h / image_h


@define(frozen=True)
class Placement:
    """Scale and top-left position of the fitted image on a surface."""

    scale: float
    left: float
    top: float
    width: float
    height: float

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        """Integer (left, top, right, bottom) box covering the image."""
        left = int(round(self.left))
        top = int(round(self.top))
        return (
            left,
            top,
            left + max(1, int(round(self.width))),
            top + max(1, int(round(self.height))),
        )


def place(
    image_w: float, image_h: float, surface_w: float, surface_h: float
) -> Placement:
    """Fit the image into the surface and center it."""
    scale = fit(image_w, image_h, surface_w, surface_h)
    width, height = image_w * scale, image_h * scale
    placement = Placement(
        scale=scale,
        left=(surface_w - width) / 2.0,
        top=(surface_h - height) / 2.0,
        width=width,
        height=height,
    )
    logger.debug("Placement: %s" % (placement,))
    return placement
