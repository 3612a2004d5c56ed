"""
Editing session driven by the host application.

The session tracks the selection, loads the selected image, owns the
options and preview while in edit mode, and exports the result::

    session = EditorSession(resolver, inserter, container_size=(320, 240))
    session.on_selection_change(["image-ref"])
    if await session.create_reflection():
        session.set_position(Orientation.LEFT)
        await session.commit()
"""

import logging
from enum import Enum
from typing import Iterable, Optional

from attrs import define

from reflection_tools.api.image import (
    Fetcher,
    LivenessToken,
    SourceImage,
    load_image,
    read_url,
)
from reflection_tools.api.options import OptionsStore
from reflection_tools.api.output import ExportPayload, OutputSurfaceManager
from reflection_tools.api.preview import PreviewSurfaceManager
from reflection_tools.api.protocols import AssetResolver, DocumentInserter, Notifier
from reflection_tools.constants import Orientation
from reflection_tools.exceptions import AssetError, AssetFetchError

logger = logging.getLogger(__name__)

SELECT_MESSAGE = "Select an element from your design."
MULTIPLE_MESSAGE = (
    "Multiple elements selected. "
    "Please select only one element at a time to create a reflection."
)


class Level(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@define(frozen=True)
class Notification:
    """Message passed to the session's notification hook."""

    level: Level
    message: str
    error: Optional[BaseException] = None


class EditorSession:
    """
    State of one reflection editor.

    :param resolver: :py:class:`~reflection_tools.api.protocols.AssetResolver`.
    :param inserter: :py:class:`~reflection_tools.api.protocols.DocumentInserter`.
    :param fetcher: coroutine function returning the bytes at a URL.
    :param notify: optional hook receiving :py:class:`Notification` values.
    :param container_size: size of the preview container, if known.
    :param output: output manager, a PNG one by default.
    """

    def __init__(
        self,
        resolver: AssetResolver,
        inserter: DocumentInserter,
        fetcher: Fetcher = read_url,
        notify: Optional[Notifier] = None,
        container_size: Optional[tuple[float, float]] = None,
        output: Optional[OutputSurfaceManager] = None,
    ):
        self._resolver = resolver
        self._inserter = inserter
        self._fetcher = fetcher
        self._notify = notify
        self._container_size = container_size
        self._output = output or OutputSurfaceManager()
        self._token: Optional[LivenessToken] = None

        self.image_ref: Optional[str] = None
        self.multiple_selected = False
        self.loading = False
        self.edit_mode = False
        self.image: Optional[SourceImage] = None
        self.store: Optional[OptionsStore] = None
        self.preview: Optional[PreviewSurfaceManager] = None

    @property
    def can_create(self) -> bool:
        return bool(self.image_ref) and not self.loading and not self.edit_mode

    @property
    def message(self) -> Optional[str]:
        """Guidance shown outside edit mode."""
        if self.edit_mode:
            return None
        return MULTIPLE_MESSAGE if self.multiple_selected else SELECT_MESSAGE

    def on_selection_change(self, refs: Iterable[str]) -> None:
        """Handle a selection-change event from the host."""
        refs = list(refs)
        if len(refs) > 1:
            self.multiple_selected = True
            self.image_ref = None
        else:
            self.multiple_selected = False
            self.image_ref = refs[0] if refs else None
        logger.debug("Selection: %d element(s)" % len(refs))

    async def create_reflection(self) -> bool:
        """Load the selected image and enter edit mode."""
        if not self.image_ref:
            logger.info("No single image selected")
            return False
        if self.loading or self.edit_mode:
            return False

        token = LivenessToken()
        self._token = token
        self.loading = True
        try:
            url = await self._resolve(self.image_ref)
            image = await load_image(url, self._fetcher, token)
        except AssetError as e:
            logger.warning("Cannot load image %s: %s" % (self.image_ref, e))
            self._send(Level.ERROR, "Could not load the selected image.", e)
            return False
        finally:
            self.loading = False

        if image is None or not token.alive:
            logger.debug("Session closed before image %s loaded" % self.image_ref)
            return False
        self._enter_edit_mode(image)
        return True

    def exit_edit_mode(self) -> None:
        """Leave edit mode; pending loads are dropped."""
        if self._token is not None:
            self._token.revoke()
            self._token = None
        if self.preview is not None:
            self.preview.dispose()
        self.preview = None
        self.store = None
        self.image = None
        self.edit_mode = False

    close = exit_edit_mode

    def resize(self, container_width: float, container_height: float) -> None:
        """Host container resized."""
        self._container_size = (container_width, container_height)
        if self.preview is not None:
            self.preview.resize(container_width, container_height)

    def set_opacity(self, opacity: int) -> None:
        if self._check_edit_mode():
            self.store.set_opacity(opacity)

    def set_offset(self, offset: int) -> None:
        if self._check_edit_mode():
            self.store.set_offset(offset)

    def set_position(self, orientation: Orientation) -> None:
        if self._check_edit_mode():
            self.store.set_position(orientation)

    async def commit(self) -> Optional[ExportPayload]:
        """Export the reflection and insert it into the document."""
        if not self._check_edit_mode():
            return None
        reference = self.preview.size
        if min(reference) <= 0:
            logger.debug("No preview surface, using the image size as reference")
            reference = self.image.size
        payload = self._output.commit(self.image, self.store.value, reference)
        if payload is None:
            self._send(Level.WARNING, "Nothing was added to the design.")
            return None

        try:
            result = await self._inserter.add_element(payload.asdict())
        except Exception as e:
            logger.error("Failed to add reflection to design: %s" % e)
            self._send(Level.ERROR, "Could not add the reflection to the design.", e)
            return None
        logger.info("Added reflection to design: %r" % (result,))
        self._send(Level.INFO, "Reflection added to the design.")
        return payload

    def _enter_edit_mode(self, image: SourceImage) -> None:
        self.image = image
        self.store = OptionsStore()
        self.preview = PreviewSurfaceManager(self.store, image)
        if self._container_size is not None:
            self.preview.resize(*self._container_size)
        self.edit_mode = True

    async def _resolve(self, ref: str) -> str:
        try:
            return await self._resolver.get_temporary_url(ref)
        except AssetError:
            raise
        except Exception as e:
            raise AssetFetchError("Cannot resolve %s: %s" % (ref, e)) from e

    def _check_edit_mode(self) -> bool:
        if not self.edit_mode or self.store is None or self.preview is None:
            logger.warning("Not in edit mode")
            return False
        return True

    def _send(
        self, level: Level, message: str, error: Optional[BaseException] = None
    ) -> None:
        if self._notify is not None:
            self._notify(Notification(level, message, error))
