"""
Various constants for reflection_tools
"""
from enum import Enum

from PIL import Image


class Orientation(str, Enum):
    """
    Edge of the image from which the reflection fades.
    """
    ABOVE = 'above'
    BELOW = 'below'
    LEFT = 'left'
    RIGHT = 'right'

    @classmethod
    def parse(cls, value):
        """Parse an orientation from its value or name, case-insensitive."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        for item in cls:
            if name in (item.value, item.name.lower()):
                return item
        raise ValueError('Unknown orientation: %r' % (value, ))


class CompositeOp(str, Enum):
    """
    Composite operations supported by the drawing context.
    """
    SOURCE_OVER = 'source-over'
    DESTINATION_OUT = 'destination-out'


DEFAULT_OPACITY = 50
DEFAULT_OFFSET = 50
DEFAULT_ORIENTATION = Orientation.BELOW

# Options are percentages.
OPTION_MIN = 0
OPTION_MAX = 100

# The preview is rendered at twice the container size and displayed at half
# scale.
DEVICE_PIXEL_RATIO = 2

# Padding of the host container, in CSS pixels, on each side.
CONTAINER_PADDING = 8

EXPORT_FORMAT = 'PNG'

RESAMPLE = Image.Resampling.BICUBIC
