import pytest

from shorturl.models import URL, User
from shorturl.rpc.context import USER_UUID, Code, RequestContext, StatusError
from shorturl.rpc.handlers import (
    PingHandler,
    StatsHandler,
    StatsResponse,
    UserURLsHandler,
    ViewItem,
)
from shorturl.storage.file import FileStorage
from shorturl.storage.memory import MemoryStorage
from shorturl.storage.session import SessionStorage

USER = "1111-2222-3333-444"


def _user_ctx():
    return RequestContext({USER_UUID: USER})


class _GoodPinger:
    def ping(self):
        return None


class _BadPinger:
    def ping(self):
        raise ConnectionError("bad test request")


class _Finder:
    def __init__(self, users=1, urls=1):
        self.users = users
        self.urls = urls

    def count_users(self):
        if isinstance(self.users, Exception):
            raise self.users
        return self.users

    def count_short_urls(self):
        if isinstance(self.urls, Exception):
            raise self.urls
        return self.urls


class _BadURLFinder:
    def find_urls_by_user_id(self, user_uuid):
        raise RuntimeError("error")


class _RecordingWorker:
    def __init__(self):
        self.calls = []

    def delete(self, user_uuid, short_urls):
        self.calls.append((user_uuid, list(short_urls)))


def test_ping_memory_storage():
    assert PingHandler(MemoryStorage()).check_storage_connect(RequestContext()) is True


def test_ping_file_storage(tmp_path):
    storage = FileStorage(tmp_path / "store.json")
    try:
        assert PingHandler(storage).check_storage_connect(RequestContext()) is True
    finally:
        storage.close()


def test_ping_ok_pinger():
    assert PingHandler(_GoodPinger()).check_storage_connect(RequestContext()) is True


def test_ping_error():
    with pytest.raises(StatusError) as info:
        PingHandler(_BadPinger()).check_storage_connect(RequestContext())
    assert info.value.code is Code.INTERNAL
    assert info.value.message == "no connect db"


@pytest.mark.parametrize(
    "finder",
    [_Finder(users=RuntimeError("error")), _Finder(urls=RuntimeError("error"))],
)
def test_stats_errors(finder):
    with pytest.raises(StatusError) as info:
        StatsHandler(finder).stats(RequestContext())
    assert info.value.code is Code.INTERNAL


def test_stats_ok():
    assert StatsHandler(_Finder(users=1, urls=1)).stats(RequestContext()) == StatsResponse(1, 1)


def test_stats_memory_storage():
    storage = MemoryStorage()
    storage.create_user(User(uuid=USER))
    assert StatsHandler(storage).stats(RequestContext()) == StatsResponse(users=1, urls=1)


def test_view_without_user():
    handler = UserURLsHandler(MemoryStorage(), SessionStorage(), _RecordingWorker())
    with pytest.raises(StatusError) as info:
        handler.view(RequestContext())
    assert info.value.code is Code.INVALID_ARGUMENT


def test_view_finder_error():
    handler = UserURLsHandler(_BadURLFinder(), SessionStorage(), _RecordingWorker())
    with pytest.raises(StatusError) as info:
        handler.view(_user_ctx())
    assert info.value.code is Code.INTERNAL
    assert info.value.message == "error"


def test_view_no_links():
    handler = UserURLsHandler(MemoryStorage(), SessionStorage(), _RecordingWorker())
    with pytest.raises(StatusError) as info:
        handler.view(_user_ctx())
    assert info.value.code is Code.NOT_FOUND


def test_view_links_present():
    storage = MemoryStorage()
    storage.create_user(User(uuid=USER))
    url_id = storage.add(URL(url="http://ya.ru", short_url="2ljdsf"))
    storage.link_url_to_user(url_id, USER)
    handler = UserURLsHandler(storage, SessionStorage(), _RecordingWorker(), "http://short")
    items = handler.view(_user_ctx())
    assert len(items) == 2
    assert ViewItem("http://short/2ljdsf", "http://ya.ru") in items


def test_delete_without_user():
    worker = _RecordingWorker()
    handler = UserURLsHandler(MemoryStorage(), SessionStorage(), worker)
    with pytest.raises(StatusError) as info:
        handler.delete(RequestContext(), [])
    assert info.value.code is Code.INVALID_ARGUMENT
    assert worker.calls == []


def test_delete_ok():
    worker = _RecordingWorker()
    handler = UserURLsHandler(MemoryStorage(), SessionStorage(), worker)
    assert handler.delete(_user_ctx(), ["112s", "dsfsdf"]) is None
    assert worker.calls == [(USER, ["112s", "dsfsdf"])]