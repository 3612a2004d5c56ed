"""
reflection-tools: render soft directional reflections of raster images.

The image is flipped along one of four edges and faded out with a linear
alpha gradient, either on a small interactive preview or at the full
resolution of the source image.

Basic usage::

    from reflection_tools import OutputSurfaceManager, RenderOptions, SourceImage

    image = SourceImage.open('photo.png')
    options = RenderOptions(opacity=70, offset=60, orientation='below')
    OutputSurfaceManager().render(image, options, image.size).save('out.png')

Architecture:

- :py:mod:`reflection_tools.composite`: geometry, gradients and compositing
- :py:mod:`reflection_tools.api`: options, preview/output surfaces, session
"""

from reflection_tools.api.image import SourceImage
from reflection_tools.api.options import OptionsStore, RenderOptions
from reflection_tools.api.output import ExportPayload, OutputSurfaceManager
from reflection_tools.api.preview import PreviewSurfaceManager
from reflection_tools.api.session import EditorSession
from reflection_tools.constants import Orientation
from reflection_tools.version import __version__

__all__ = [
    "EditorSession",
    "ExportPayload",
    "OptionsStore",
    "Orientation",
    "OutputSurfaceManager",
    "PreviewSurfaceManager",
    "RenderOptions",
    "SourceImage",
    "__version__",
]
