"""
Render options and the options store.
"""

import logging
from typing import Callable, Optional

from attrs import define, evolve, field

from reflection_tools.composite.geometry import FlipMultipliers, flip_multipliers
from reflection_tools.constants import (
    DEFAULT_OFFSET,
    DEFAULT_OPACITY,
    DEFAULT_ORIENTATION,
    OPTION_MAX,
    OPTION_MIN,
    Orientation,
)
from reflection_tools.validators import clamp

logger = logging.getLogger(__name__)


@define(frozen=True)
class RenderOptions:
    """
    Parameters of the reflection.

    Example::

        from reflection_tools.api.options import RenderOptions
        from reflection_tools.constants import Orientation

        options = RenderOptions(opacity=80, orientation=Orientation.LEFT)

    .. py:attribute:: opacity

        Opacity of the reflected image in percent, clamped to [0, 100].

    .. py:attribute:: offset

        Extent of the fade in percent of the surface, clamped to [0, 100].

    .. py:attribute:: orientation

        :py:class:`~reflection_tools.constants.Orientation`.
    """

    opacity: int = field(
        default=DEFAULT_OPACITY, converter=clamp(OPTION_MIN, OPTION_MAX)
    )
    offset: int = field(
        default=DEFAULT_OFFSET, converter=clamp(OPTION_MIN, OPTION_MAX)
    )
    orientation: Orientation = field(
        default=DEFAULT_ORIENTATION, converter=Orientation.parse
    )

    @property
    def flip(self) -> FlipMultipliers:
        return flip_multipliers(self.orientation)

    def with_opacity(self, opacity: int) -> "RenderOptions":
        return evolve(self, opacity=opacity)

    def with_offset(self, offset: int) -> "RenderOptions":
        return evolve(self, offset=offset)

    def with_orientation(self, orientation: Orientation) -> "RenderOptions":
        """Change orientation; opacity and offset go back to the defaults."""
        return RenderOptions(
            opacity=DEFAULT_OPACITY,
            offset=DEFAULT_OFFSET,
            orientation=orientation,
        )


class OptionsStore:
    """
    Holder of the current :py:class:`RenderOptions` of an editing session.

    Every setter replaces the value as a whole and synchronously notifies
    subscribers with the new value.
    """

    def __init__(self, options: Optional[RenderOptions] = None):
        self._value = options if options is not None else RenderOptions()
        self._subscribers: list[Callable[[RenderOptions], None]] = []

    @property
    def value(self) -> RenderOptions:
        return self._value

    def subscribe(
        self, callback: Callable[[RenderOptions], None]
    ) -> Callable[[], None]:
        """Register a callback; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def replace(self, options: RenderOptions) -> None:
        if options == self._value:
            return
        logger.debug("Options: %s" % (options,))
        self._value = options
        for callback in list(self._subscribers):
            callback(options)

    def set_opacity(self, opacity: int) -> None:
        self.replace(self._value.with_opacity(opacity))

    def set_offset(self, offset: int) -> None:
        self.replace(self._value.with_offset(offset))

    def set_position(self, orientation: Orientation) -> None:
        self.replace(self._value.with_orientation(orientation))
