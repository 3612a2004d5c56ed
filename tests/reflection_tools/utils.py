import io
import logging
from typing import Optional

import numpy as np
from PIL import Image

from reflection_tools.api import pil_io
from reflection_tools.api.image import SourceImage

logger = logging.getLogger(__name__)

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


def solid_image(width: int, height: int, color=RED) -> SourceImage:
    return SourceImage(Image.new("RGBA", (width, height), color))


def split_image(
    width: int, height: int, first=RED, second=BLUE, vertical: bool = True
) -> SourceImage:
    """Image with ``first`` on the left (or top) half, ``second`` on the other."""
    image = Image.new("RGBA", (width, height), second)
    if vertical:
        image.paste(Image.new("RGBA", (width // 2, height), first), (0, 0))
    else:
        image.paste(Image.new("RGBA", (width, height // 2), first), (0, 0))
    return SourceImage(image)


def png_bytes(width: int, height: int, color=RED, mode: str = "RGBA") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def png_data_url(width: int, height: int, color=RED) -> str:
    return pil_io.to_data_url(Image.new("RGBA", (width, height), color))


def alpha_of(image: Image.Image, box: Optional[tuple] = None) -> np.ndarray:
    if box is not None:
        image = image.crop(box)
    return np.asarray(image, dtype=np.float32)[:, :, 3] / 255.0
