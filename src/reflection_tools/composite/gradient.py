"""
Gradient vectors and linear gradient rasterization.

A gradient vector is anchored at the reflecting edge of a surface and spans
the full surface along the axis implied by the orientation:

======== ==========================
Below    ``(0, height, 0, 0)``
Above    ``(0, 0, 0, height)``
Left     ``(0, 0, width, 0)``
Right    ``(width, 0, 0, 0)``
======== ==========================

Vectors remember the surface size they were computed for, and using one
against a surface of a different size raises
:py:class:`~reflection_tools.exceptions.StaleGradientError`.
"""

import logging
from typing import Iterable, Optional

import numpy as np
from attrs import define

from reflection_tools.constants import Orientation
from reflection_tools.exceptions import StaleGradientError

logger = logging.getLogger(__name__)


@define(frozen=True)
class GradientVector:
    """
    Linear gradient endpoints in surface pixel space.

    .. py:attribute:: x0
    .. py:attribute:: y0
    .. py:attribute:: x1
    .. py:attribute:: y1

        Start and end points.

    .. py:attribute:: width
    .. py:attribute:: height

        Size of the surface the vector was computed for.
    """

    x0: float
    y0: float
    x1: float
    y1: float
    width: int
    height: int

    @property
    def points(self) -> tuple[float, float, float, float]:
        return (self.x0, self.y0, self.x1, self.y1)

    def matches(self, surface) -> bool:
        """Whether the vector was computed for the surface's size."""
        return (self.width, self.height) == (surface.width, surface.height)

    def check(self, surface) -> None:
        if not self.matches(surface):
            raise StaleGradientError(
                "Gradient vector for %dx%d used on %dx%d surface"
                % (self.width, self.height, surface.width, surface.height)
            )


def vector_for(orientation: Orientation, width: int, height: int) -> GradientVector:
    """Return the gradient vector of the orientation for a surface size."""
    orientation = Orientation.parse(orientation)
    if orientation == Orientation.BELOW:
        points = (0, height, 0, 0)
    elif orientation == Orientation.ABOVE:
        points = (0, 0, 0, height)
    elif orientation == Orientation.LEFT:
        points = (0, 0, width, 0)
    elif orientation == Orientation.RIGHT:
        points = (width, 0, 0, 0)
    else:
        raise AssertionError("Unhandled orientation: %r" % orientation)
    return GradientVector(*points, width=width, height=height)


def vectors_for(width: int, height: int) -> dict[Orientation, GradientVector]:
    """Vectors of every orientation for a surface size."""
    return {
        orientation: vector_for(orientation, width, height)
        for orientation in Orientation
    }


def rescale(vector: GradientVector, width: int, height: int) -> GradientVector:
    """
    Re-anchor a vector to another surface size.

    Non-zero x components become ``width`` and non-zero y components become
    ``height``; zero components stay zero.
    """
    x0, y0, x1, y1 = (
        width if vector.x0 else 0,
        height if vector.y0 else 0,
        width if vector.x1 else 0,
        height if vector.y1 else 0,
    )
    return GradientVector(x0, y0, x1, y1, width=width, height=height)


def draw_linear_gradient(
    vector: GradientVector,
    stops: Iterable[tuple[float, float]],
    surface=None,
) -> np.ndarray:
    """
    Rasterize a linear gradient of alpha values.

    Stops are ``(location, value)`` pairs with location in [0, 1]. Values
    before the first stop and after the last stop take the end values. When
    stops share a location the last added one wins.

    :param vector: gradient vector, also gives the output size.
    :param stops: color stops.
    :param surface: if given, the vector is checked against its size.
    :return: float32 ndarray of shape (height, width, 1).
    """
    if surface is not None:
        vector.check(surface)
    height, width = vector.height, vector.width

    x0, y0, x1, y1 = vector.points
    dx, dy = x1 - x0, y1 - y0
    length = dx * dx + dy * dy
    if length == 0:
        logger.debug("Degenerate gradient vector: %s" % (vector,))
        T = np.zeros((height, width), dtype=np.float32)
    else:
        X, Y = np.meshgrid(
            np.arange(width, dtype=np.float32) + 0.5,
            np.arange(height, dtype=np.float32) + 0.5,
        )
        T = ((X - x0) * dx + (Y - y0) * dy) / length

    G = _make_stop_interpolator(stops)
    return np.expand_dims(G(T).astype(np.float32), 2)


def _make_stop_interpolator(stops: Iterable[tuple[float, float]]):
    from scipy import interpolate  # type: ignore[import-untyped]

    X: list[float] = []
    Y: list[float] = []
    for location, value in sorted(stops, key=lambda stop: stop[0]):
        location = min(1.0, max(0.0, float(location)))
        if len(X) and X[-1] == location:
            logger.debug("Duplicate stop at %g" % location)
            X.pop(), Y.pop()
        X.append(location), Y.append(float(value))
    assert len(X) > 0, "Gradient needs at least one stop"
    if len(X) == 1:
        X = [0.0, 1.0]
        Y = [Y[0], Y[0]]
    return interpolate.interp1d(
        X, Y, bounds_error=False, fill_value=(Y[0], Y[-1])
    )


def erase_stops(offset: Optional[float]) -> list[tuple[float, float]]:
    """Stops of the fade: opaque at the edge, transparent at ``offset``."""
    return [(0.0, 1.0), (float(offset or 0.0), 0.0)]
