"""
Protocol definitions of the host collaborators.

The core never talks to a host application directly. These protocols
describe what it consumes (asset resolution, document insertion, user
notification) and what it exposes to the parameter controls.
"""

from typing import Any, Awaitable, Optional, Protocol

from reflection_tools.constants import Orientation


class AssetResolver(Protocol):
    """Resolves an image reference to a time-limited fetch URL."""

    async def get_temporary_url(self, ref: str) -> str:
        """URL of the referenced image."""
        ...


class DocumentInserter(Protocol):
    """Inserts an element into the host document."""

    async def add_element(self, element: dict[str, Any]) -> Any:
        """Insert ``{"type": "image", "dataUrl": ...}``."""
        ...


class Notifier(Protocol):
    """Receives user-facing notifications; policy is up to the host."""

    def __call__(self, notification: Any) -> None: ...


class ReflectionCommands(Protocol):
    """Operations invoked by the parameter controls."""

    def set_opacity(self, opacity: int) -> None:
        """Opacity slider, 0-100."""
        ...

    def set_offset(self, offset: int) -> None:
        """Offset slider, 0-100."""
        ...

    def set_position(self, orientation: Orientation) -> None:
        """Orientation segmented control."""
        ...

    def commit(self) -> Awaitable[Optional[Any]]:
        """Render at full resolution and insert into the document."""
        ...
