import io
import logging

import numpy as np
import pytest
from PIL import Image

from reflection_tools.api import pil_io
from reflection_tools.api.options import RenderOptions
from reflection_tools.api.output import ExportPayload, OutputSurfaceManager
from reflection_tools.composite import surface as surface_module
from reflection_tools.constants import Orientation

from ..utils import BLUE, RED, alpha_of, solid_image, split_image

logger = logging.getLogger(__name__)


def _decode(payload):
    data = pil_io.from_data_url(payload.data_url)
    return Image.open(io.BytesIO(data)).convert("RGBA")


@pytest.mark.parametrize(
    "image_size, reference, expected",
    [
        ((800, 600), (300, 200), (900, 600)),
        ((800, 600), (300, 300), (800, 800)),
        ((100, 100), (400, 200), (200, 100)),
        ((640, 480), (640, 480), (640, 480)),
    ],
)
def test_working_size(image_size, reference, expected):
    manager = OutputSurfaceManager()
    assert manager.working_size(solid_image(*image_size), reference) == expected


def test_commit_size():
    payload = OutputSurfaceManager().commit(
        solid_image(800, 600), RenderOptions(), (300, 200)
    )
    assert isinstance(payload, ExportPayload)
    assert (payload.width, payload.height) == (800, 600)
    assert payload.data_url.startswith("data:image/png;base64,")
    assert _decode(payload).size == (800, 600)
    assert payload.asdict() == {"type": "image", "dataUrl": payload.data_url}


def test_commit_not_stretched():
    options = RenderOptions(opacity=100, offset=0, orientation=Orientation.LEFT)
    payload = OutputSurfaceManager().commit(
        split_image(800, 600), options, (300, 200)
    )
    image = _decode(payload)
    assert np.allclose(alpha_of(image), 1.0)
    assert image.getpixel((10, 300)) == BLUE
    assert image.getpixel((390, 300)) == BLUE
    assert image.getpixel((410, 300)) == RED
    assert image.getpixel((790, 300)) == RED


def test_commit_letterbox():
    # Wide reference: the square image is centered in the working surface.
    options = RenderOptions(opacity=100, offset=0)
    image = OutputSurfaceManager().render(solid_image(100, 100), options, (400, 200))
    assert image.size == (100, 100)
    assert np.allclose(alpha_of(image), 1.0)


def test_commit_gradient_is_rescaled():
    options = RenderOptions(opacity=100, offset=100, orientation=Orientation.BELOW)
    image = OutputSurfaceManager().render(solid_image(800, 600), options, (300, 200))
    alpha = alpha_of(image)
    expected = (599.5 - np.arange(600)) / 600.0
    assert np.allclose(alpha[:, 400], expected, atol=1.5 / 255)


def test_commit_no_image():
    assert OutputSurfaceManager().commit(None, RenderOptions(), (300, 200)) is None


@pytest.mark.parametrize("reference", [(0, 0), (0, 200), (300, 0)])
def test_commit_empty_reference(reference):
    manager = OutputSurfaceManager()
    assert manager.commit(solid_image(10, 10), RenderOptions(), reference) is None


def test_commit_unsupported(monkeypatch):
    def fail(height, width):
        raise MemoryError("out of memory")

    monkeypatch.setattr(surface_module, "empty", fail)
    manager = OutputSurfaceManager()
    assert manager.commit(solid_image(10, 10), RenderOptions(), (10, 10)) is None


def test_payload_size_validation():
    with pytest.raises(ValueError):
        ExportPayload("data:image/png;base64,", 0, 10)
