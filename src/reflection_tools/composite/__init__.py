"""
Composite module for reflection rendering.

Key modules:

- :py:mod:`reflection_tools.composite.geometry`: fit scaling and flips
- :py:mod:`reflection_tools.composite.gradient`: gradient vectors and fills
- :py:mod:`reflection_tools.composite.blend`: composite operators
- :py:mod:`reflection_tools.composite.surface`: surfaces and contexts
- :py:mod:`reflection_tools.composite.compositor`: the reflection renderer

Example usage::

    from reflection_tools.api.image import SourceImage
    from reflection_tools.api.options import RenderOptions
    from reflection_tools.composite import Surface, render

    surface = Surface(600, 400)
    render(surface, SourceImage.open('photo.png'), RenderOptions())
    surface.topil().save('reflection.png')
"""

from reflection_tools.composite.compositor import render
from reflection_tools.composite.surface import DrawingContext, Surface

__all__ = [
    "DrawingContext",
    "Surface",
    "render",
]
