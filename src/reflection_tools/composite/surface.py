"""
Surfaces and drawing contexts.

A :py:class:`Surface` only owns its pixel buffer. Drawing state (global
alpha, composite operation and transform) lives in a
:py:class:`DrawingContext` that is acquired per render and released
afterwards::

    surface = Surface(200, 100)
    with surface.context() as ctx:
        ctx.global_alpha = 0.5
        ctx.translate(100, 50)
        ctx.draw_image(image, -image.width / 2, -image.height / 2)
"""

import contextlib
import logging
from typing import Iterable, Iterator, Optional

import numpy as np
from PIL import Image

from reflection_tools.api import pil_io
from reflection_tools.composite.blend import composite_op, empty
from reflection_tools.composite.gradient import GradientVector, draw_linear_gradient
from reflection_tools.composite.utils import intersect
from reflection_tools.constants import RESAMPLE, CompositeOp
from reflection_tools.exceptions import UnsupportedSurfaceError

logger = logging.getLogger(__name__)


class Surface:
    """
    Pixel buffer of straight float color and alpha.

    Allocation failures are not raised; the surface is then unsupported and
    :py:meth:`context` raises :py:class:`UnsupportedSurfaceError`.

    :param width: width in pixels.
    :param height: height in pixels.
    """

    def __init__(self, width: int, height: int):
        self._width = max(0, int(width))
        self._height = max(0, int(height))
        self._color: Optional[np.ndarray] = None
        self._alpha: Optional[np.ndarray] = None
        try:
            self._color, self._alpha = empty(self._height, self._width)
        except (MemoryError, ValueError) as e:
            logger.warning(
                "Cannot allocate %dx%d surface: %s" % (self._width, self._height, e)
            )

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> tuple[int, int]:
        return (self._width, self._height)

    @property
    def supported(self) -> bool:
        """Whether a drawing context can be acquired."""
        return self._color is not None

    def is_empty(self) -> bool:
        """True for a zero-area surface."""
        return self._width == 0 or self._height == 0

    @contextlib.contextmanager
    def context(self) -> Iterator["DrawingContext"]:
        """Acquire a drawing context, released when the block exits."""
        if not self.supported:
            raise UnsupportedSurfaceError(
                "No drawing context for %dx%d surface" % self.size
            )
        ctx = DrawingContext(self)
        try:
            yield ctx
        finally:
            ctx.release()

    def numpy(self) -> np.ndarray:
        """Pixels as a float32 (H, W, 4) array."""
        if not self.supported:
            raise UnsupportedSurfaceError("Surface has no pixels")
        return np.concatenate((self._color, self._alpha), axis=2)

    def alpha(self) -> np.ndarray:
        """Alpha as a float32 (H, W) array."""
        if not self.supported:
            raise UnsupportedSurfaceError("Surface has no pixels")
        return self._alpha[:, :, 0].copy()

    def topil(self) -> Image.Image:
        """Pixels as a Pillow RGBA image."""
        if not self.supported:
            raise UnsupportedSurfaceError("Surface has no pixels")
        return pil_io.from_arrays(self._color, self._alpha)

    def __repr__(self) -> str:
        return "%s(width=%d, height=%d)" % (
            self.__class__.__name__,
            self._width,
            self._height,
        )


class DrawingContext:
    """
    Transient drawing state bound to one surface.

    Transforms are limited to translation and axis scaling, which covers
    reflections about either axis.
    """

    def __init__(self, surface: Surface):
        self._surface: Optional[Surface] = surface
        self.global_alpha = 1.0
        self.composite_operation = CompositeOp.SOURCE_OVER
        self.reset_transform()

    @property
    def surface(self) -> Surface:
        if self._surface is None:
            raise UnsupportedSurfaceError("Drawing context was released")
        return self._surface

    @property
    def global_alpha(self) -> float:
        return self._global_alpha

    @global_alpha.setter
    def global_alpha(self, value: float) -> None:
        self._global_alpha = min(1.0, max(0.0, float(value)))

    @property
    def composite_operation(self) -> CompositeOp:
        return self._composite_operation

    @composite_operation.setter
    def composite_operation(self, value) -> None:
        self._composite_operation = CompositeOp(value)

    @property
    def transform(self) -> tuple[float, float, float, float]:
        """Current (scale_x, scale_y, translate_x, translate_y)."""
        return (self._sx, self._sy, self._tx, self._ty)

    def reset_transform(self) -> None:
        self._sx, self._sy, self._tx, self._ty = 1.0, 1.0, 0.0, 0.0

    def translate(self, x: float, y: float) -> None:
        self._tx += self._sx * x
        self._ty += self._sy * y

    def scale(self, x: float, y: float) -> None:
        self._sx *= x
        self._sy *= y

    def clear(self) -> None:
        """Clear the whole surface to transparent, ignoring any state."""
        surface = self.surface
        surface._color[:] = 0.0
        surface._alpha[:] = 0.0

    def draw_image(self, image: Image.Image, x: float, y: float) -> None:
        """Draw an RGBA image with its top-left corner at (x, y)."""
        sx, sy, tx, ty = self.transform
        left, right = sorted((sx * x + tx, sx * (x + image.width) + tx))
        top, bottom = sorted((sy * y + ty, sy * (y + image.height) + ty))
        bbox = (
            int(round(left)),
            int(round(top)),
            int(round(left)) + max(1, int(round(right - left))),
            int(round(top)) + max(1, int(round(bottom - top))),
        )
        size = (bbox[2] - bbox[0], bbox[3] - bbox[1])
        if size != image.size:
            image = image.resize(size, resample=RESAMPLE)
        if sx < 0:
            image = image.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
        if sy < 0:
            image = image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
        color, alpha = pil_io.to_arrays(image)
        self._composite(color, alpha, bbox)

    def draw_surface(self, source: Surface, x: float, y: float) -> None:
        """Draw another surface with its top-left corner at (x, y)."""
        if not source.supported:
            raise UnsupportedSurfaceError("Source surface has no pixels")
        sx, sy, tx, ty = self.transform
        left = int(round(sx * x + tx))
        top = int(round(sy * y + ty))
        bbox = (left, top, left + source.width, top + source.height)
        self._composite(source._color, source._alpha, bbox)

    def fill_gradient(
        self, vector: GradientVector, stops: Iterable[tuple[float, float]]
    ) -> None:
        """Fill the whole surface with a white linear alpha gradient."""
        surface = self.surface
        alpha = draw_linear_gradient(vector, stops, surface)
        color = np.ones((surface.height, surface.width, 3), dtype=np.float32)
        self._composite(color, alpha, (0, 0, surface.width, surface.height))

    def release(self) -> None:
        self._surface = None

    def _composite(self, color, alpha, bbox) -> None:
        surface = self.surface
        viewport = intersect(bbox, (0, 0, surface.width, surface.height))
        if viewport == (0, 0, 0, 0):
            logger.debug("Nothing to draw in %s" % (bbox,))
            return
        src = (
            slice(viewport[1] - bbox[1], viewport[3] - bbox[1]),
            slice(viewport[0] - bbox[0], viewport[2] - bbox[0]),
        )
        dst = (
            slice(viewport[1], viewport[3]),
            slice(viewport[0], viewport[2]),
        )
        func = composite_op(self.composite_operation)
        C, A = func(
            surface._color[dst],
            surface._alpha[dst],
            color[src],
            alpha[src] * self.global_alpha,
        )
        surface._color[dst] = C
        surface._alpha[dst] = A
