import pytest

from backend import BackendError
from roku_client import RokuClient


@pytest.fixture
def roku(session, roku_backend):
    return RokuClient(session, roku_backend.host, roku_backend.port)


async def test_list_channels(roku, roku_backend, roku_apps_xml):
    roku_backend.reply("GET", "/query/apps", (200, roku_apps_xml))

    channels = await roku.list_channels()

    assert [c.id for c in channels] == ["12", "2285", "13"]
    assert roku_backend.calls[0]["headers"]["Accept"] == "application/xml"


async def test_launch_and_keypress_paths(roku, roku_backend):
    await roku.launch("2285")
    await roku.keypress("Fwd")
    assert roku_backend.paths("POST") == ["/launch/2285", "/keypress/Fwd"]


async def test_list_apps_http_error(roku, roku_backend):
    roku_backend.reply("GET", "/query/apps", (404, ""))
    with pytest.raises(BackendError):
        await roku.list_apps()
