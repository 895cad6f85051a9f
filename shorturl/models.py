"""Data models for short links and users, with their JSON line format."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

_ZERO_TIME_TEXT = "0001-01-01T00:00:00Z"
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_TIME_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<zone>Z|[+-]\d{2}:\d{2})$"
)


@dataclass
class URL:
    """A shortened link; ``deleted_at`` is ``None`` while the link is live."""

    id: int = 0
    short_url: str = ""
    url: str = ""
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass
class User:
    """A user of the service."""

    id: int = 0
    name: str = ""
    login: str = ""
    password: str = ""
    uuid: str = ""
    urls: list[URL] = field(default_factory=list)


def _format_time(moment: datetime | None) -> str:
    if moment is None:
        return _ZERO_TIME_TEXT
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    base = moment.strftime("%Y-%m-%dT%H:%M:%S")
    frac = f"{moment.microsecond:06d}".rstrip("0")
    if frac:
        base += "." + frac
    offset = moment.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return base + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{base}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _parse_time(text: str | None) -> datetime | None:
    if text is None or text == _ZERO_TIME_TEXT:
        return None
    match = _TIME_RE.match(text)
    if match is None:
        raise ValueError(f"invalid timestamp: {text!r}")
    frac = (match["frac"] or "")[:6].ljust(6, "0")
    zone = "+00:00" if match["zone"] == "Z" else match["zone"]
    moment = datetime.fromisoformat(f"{match['base']}.{frac}{zone}")
    return None if moment == _ZERO_TIME else moment


def _url_to_dict(url: URL) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if url.id:
        data["id"] = url.id
    data["short_url"] = url.short_url
    data["url"] = url.url
    data["deleted_at"] = _format_time(url.deleted_at)
    return data


def _url_from_dict(data: dict[str, Any]) -> URL:
    return URL(
        id=int(data.get("id") or 0),
        short_url=data.get("short_url") or "",
        url=data.get("url") or "",
        deleted_at=_parse_time(data.get("deleted_at")),
    )


def _dumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def url_to_json(url: URL) -> str:
    """Serialise a link to a single JSON line."""
    return _dumps(_url_to_dict(url))


def url_from_json(text: str) -> URL:
    """Parse a link from its JSON form."""
    return _url_from_dict(json.loads(text))


def user_to_json(user: User) -> str:
    """Serialise a user to a single JSON line."""
    data: dict[str, Any] = {}
    if user.id:
        data["id"] = user.id
    data.update(
        name=user.name,
        login=user.login,
        password=user.password,
        uuid=user.uuid,
        urls=[_url_to_dict(url) for url in user.urls],
    )
    return _dumps(data)


def user_from_json(text: str) -> User:
    """Parse a user from its JSON form."""
    data = json.loads(text)
    return User(
        id=int(data.get("id") or 0),
        name=data.get("name") or "",
        login=data.get("login") or "",
        password=data.get("password") or "",
        uuid=data.get("uuid") or "",
        urls=[_url_from_dict(item) for item in data.get("urls") or []],
    )