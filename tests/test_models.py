import json
from datetime import datetime, timedelta, timezone

import pytest

from shorturl.models import (
    URL,
    User,
    url_from_json,
    url_to_json,
    user_from_json,
    user_to_json,
)


def test_url_to_json_layout():
    text = url_to_json(URL(short_url="aaa", url="bbbbbbb"))
    assert text == '{"short_url":"aaa","url":"bbbbbbb","deleted_at":"0001-01-01T00:00:00Z"}'


def test_url_with_id_round_trip():
    url = URL(id=7, short_url="x1", url="https://ya.ru")
    text = url_to_json(url)
    assert json.loads(text)["id"] == 7
    assert url_from_json(text) == url


def test_zero_id_is_omitted():
    data = json.loads(url_to_json(URL(short_url="s", url="https://ya.ru")))
    assert "id" not in data
    assert data["short_url"] == "s"


def test_deleted_at_round_trip():
    moment = datetime(2024, 5, 1, 12, 30, 15, 123456, tzinfo=timezone.utc)
    url = URL(id=2, short_url="q", url="https://ya.ru/1", deleted_at=moment)
    restored = url_from_json(url_to_json(url))
    assert restored.deleted_at == moment
    assert restored.is_deleted


def test_deleted_at_with_offset_round_trip():
    moment = datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=-5)))
    restored = url_from_json(url_to_json(URL(short_url="a", url="b", deleted_at=moment)))
    assert restored.deleted_at == moment
    assert restored.deleted_at.utcoffset() == timedelta(hours=-5)


def test_zero_time_means_not_deleted():
    url = url_from_json('{"short_url":"1","url":"111","deleted_at":"0001-01-01T00:00:00Z"}')
    assert url.url == "111"
    assert url.deleted_at is None
    assert not url.is_deleted


def test_nanosecond_timestamp_is_truncated_to_microseconds():
    url = url_from_json('{"short_url":"1","url":"2","deleted_at":"2024-05-01T12:30:15.123456789+03:00"}')
    assert url.deleted_at == datetime(2024, 5, 1, 12, 30, 15, 123456, tzinfo=timezone(timedelta(hours=3)))


def test_missing_fields_take_defaults():
    assert url_from_json("{}") == URL()


def test_bad_timestamp_raises():
    with pytest.raises(ValueError):
        url_from_json('{"short_url":"1","url":"2","deleted_at":"yesterday"}')


def test_user_round_trip_with_urls():
    password = "password"
    user = User(
        id=3,
        name="name",
        login="cat",
        password=password,
        uuid="111-222-333",
        urls=[URL(id=1, short_url="abc123", url="https://ya.ru/1")],
    )
    assert user_from_json(user_to_json(user)) == user


def test_user_json_keys():
    password = "password"
    data = json.loads(user_to_json(User(login="testuser", password=password, uuid="testuuid")))
    assert list(data) == ["name", "login", "password", "uuid", "urls"]
    assert data["login"] == "testuser"


def test_user_null_urls_become_empty_list():
    user = user_from_json('{"login":"testuser","uuid":"testuuid","urls":null}')
    assert user.urls == []
    assert user.uuid == "testuuid"