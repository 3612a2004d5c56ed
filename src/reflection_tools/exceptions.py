"""
Exceptions raised by reflection_tools.
"""


class ReflectionError(Exception):
    """Base class for all errors of this package."""


class GeometryError(ReflectionError, ValueError):
    """Zero-area image or surface passed to the geometry resolver.

    This is a programming error; callers must check sizes beforehand.
    """


class StaleGradientError(ReflectionError, ValueError):
    """Gradient vector computed for a surface of a different size."""


class UnsupportedSurfaceError(ReflectionError):
    """No drawing context can be acquired for the surface."""


class AssetError(ReflectionError):
    """The source image could not be obtained."""


class AssetFetchError(AssetError):
    """Resolving or fetching the image failed."""


class AssetDecodeError(AssetError):
    """The fetched bytes are not a decodable image."""
