import logging

import pytest
from PIL import Image

from reflection_tools.api.protocols import ReflectionCommands
from reflection_tools.api.session import (
    MULTIPLE_MESSAGE,
    SELECT_MESSAGE,
    EditorSession,
    Level,
)
from reflection_tools.constants import Orientation
from reflection_tools.exceptions import AssetDecodeError, AssetFetchError

from ..utils import png_data_url

logger = logging.getLogger(__name__)


class FakeResolver:
    def __init__(self, url=None, error=None):
        self.url = url or png_data_url(40, 30)
        self.error = error
        self.refs = []

    async def get_temporary_url(self, ref):
        self.refs.append(ref)
        if self.error is not None:
            raise self.error
        return self.url


class FakeInserter:
    def __init__(self, error=None):
        self.error = error
        self.elements = []

    async def add_element(self, element):
        if self.error is not None:
            raise self.error
        self.elements.append(element)
        return {"ok": True}


@pytest.fixture
def notifications():
    return []


def _session(notifications, resolver=None, inserter=None, **kwargs):
    return EditorSession(
        resolver or FakeResolver(),
        inserter or FakeInserter(),
        notify=notifications.append,
        container_size=(66, 56),
        **kwargs
    )


def test_selection(notifications):
    session = _session(notifications)
    assert not session.can_create
    assert session.message == SELECT_MESSAGE

    session.on_selection_change(["ref-1"])
    assert session.image_ref == "ref-1"
    assert session.can_create
    assert session.message == SELECT_MESSAGE

    session.on_selection_change(["ref-1", "ref-2"])
    assert session.image_ref is None
    assert session.multiple_selected
    assert not session.can_create
    assert session.message == MULTIPLE_MESSAGE

    session.on_selection_change([])
    assert session.image_ref is None
    assert not session.multiple_selected
    assert not session.can_create


@pytest.mark.asyncio
async def test_create_reflection(notifications):
    resolver = FakeResolver()
    session = _session(notifications, resolver=resolver)
    session.on_selection_change(["ref-1"])

    assert await session.create_reflection()
    assert resolver.refs == ["ref-1"]
    assert session.edit_mode
    assert not session.loading
    assert session.message is None
    assert session.image.size == (40, 30)
    assert session.preview.size == (100, 80)
    assert session.store.value.orientation == Orientation.BELOW
    assert session.preview.surface.alpha().max() > 0.0


@pytest.mark.asyncio
async def test_create_without_selection(notifications):
    session = _session(notifications)
    assert not await session.create_reflection()
    assert not session.edit_mode


@pytest.mark.asyncio
async def test_loading_flag(notifications):
    states = []
    session = None

    async def fetch(url):
        states.append(session.loading)
        return b""

    session = _session(notifications, fetcher=fetch)
    session.on_selection_change(["ref-1"])
    assert not await session.create_reflection()
    assert states == [True]
    assert not session.loading


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "resolver",
    [
        FakeResolver(error=RuntimeError("network down")),
        FakeResolver(error=AssetDecodeError("bad")),
        FakeResolver(url="data:image/png;base64,AAAA"),
        FakeResolver(url="https://example.com/image.png"),
    ],
)
async def test_create_failure(notifications, resolver):
    session = _session(notifications, resolver=resolver)
    session.on_selection_change(["ref-1"])
    assert not await session.create_reflection()
    assert not session.loading
    assert not session.edit_mode
    assert session.preview is None
    assert session.can_create
    assert [n.level for n in notifications] == [Level.ERROR]


@pytest.mark.asyncio
async def test_create_fetcher_failure(notifications):
    async def fetch(url):
        raise ConnectionError("reset by peer")

    session = _session(notifications, fetcher=fetch)
    session.on_selection_change(["ref-1"])
    assert not await session.create_reflection()
    assert not session.loading
    assert not session.edit_mode
    assert [n.level for n in notifications] == [Level.ERROR]
    assert isinstance(notifications[0].error, AssetFetchError)


@pytest.mark.asyncio
async def test_create_image_too_large(notifications, monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    session = _session(notifications, resolver=FakeResolver(png_data_url(20, 20)))
    session.on_selection_change(["ref-1"])
    assert not await session.create_reflection()
    assert not session.edit_mode
    assert isinstance(notifications[0].error, AssetDecodeError)


@pytest.mark.asyncio
async def test_exit_while_loading(notifications):
    session = None

    async def fetch(url):
        session.exit_edit_mode()
        return b"never decoded"

    session = _session(notifications, fetcher=fetch)
    session.on_selection_change(["ref-1"])
    assert not await session.create_reflection()
    assert not session.edit_mode
    assert not session.loading
    assert session.preview is None
    assert notifications == []


@pytest.mark.asyncio
async def test_commands(notifications):
    session = _session(notifications)
    session.set_opacity(10)
    assert session.store is None

    session.on_selection_change(["ref-1"])
    await session.create_reflection()
    commands: ReflectionCommands = session
    commands.set_opacity(90)
    commands.set_offset(10)
    assert (session.store.value.opacity, session.store.value.offset) == (90, 10)
    commands.set_position(Orientation.RIGHT)
    assert session.store.value.opacity == 50
    assert session.store.value.offset == 50
    assert session.preview.options is session.store.value


@pytest.mark.asyncio
async def test_resize(notifications):
    session = _session(notifications)
    session.resize(86, 66)
    session.on_selection_change(["ref-1"])
    await session.create_reflection()
    assert session.preview.size == (140, 100)
    session.resize(36, 36)
    assert session.preview.size == (40, 40)


@pytest.mark.asyncio
async def test_commit(notifications):
    inserter = FakeInserter()
    session = _session(notifications, inserter=inserter)
    session.on_selection_change(["ref-1"])
    await session.create_reflection()

    payload = await session.commit()
    assert (payload.width, payload.height) == (40, 30)
    assert inserter.elements == [payload.asdict()]
    assert inserter.elements[0]["type"] == "image"
    assert inserter.elements[0]["dataUrl"].startswith("data:image/png;base64,")
    assert [n.level for n in notifications] == [Level.INFO]


@pytest.mark.asyncio
async def test_commit_insert_failure(notifications):
    error = RuntimeError("rejected")
    session = _session(notifications, inserter=FakeInserter(error=error))
    session.on_selection_change(["ref-1"])
    await session.create_reflection()

    assert await session.commit() is None
    assert notifications[-1].level == Level.ERROR
    assert notifications[-1].error is error
    assert session.edit_mode


@pytest.mark.asyncio
async def test_commit_outside_edit_mode(notifications):
    inserter = FakeInserter()
    session = _session(notifications, inserter=inserter)
    assert await session.commit() is None
    assert inserter.elements == []


@pytest.mark.asyncio
async def test_commit_without_container(notifications):
    inserter = FakeInserter()
    session = EditorSession(FakeResolver(), inserter, notify=notifications.append)
    session.on_selection_change(["ref-1"])
    await session.create_reflection()
    assert session.preview.size == (0, 0)
    payload = await session.commit()
    assert (payload.width, payload.height) == (40, 30)


@pytest.mark.asyncio
async def test_exit_edit_mode(notifications):
    session = _session(notifications)
    session.on_selection_change(["ref-1"])
    await session.create_reflection()
    store = session.store
    session.exit_edit_mode()
    assert not session.edit_mode
    assert session.preview is None
    store.set_opacity(1)
    assert session.can_create
