"""RPC handlers for health checks, statistics and user links."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol

from shorturl.models import URL
from shorturl.rpc.context import Code, RequestContext, StatusError, fill_user_uuid

DEFAULT_BASE_SHORT_URL = "http://localhost:8080"


class Pinger(Protocol):
    def ping(self) -> None: ...


class StatsFinder(Protocol):
    def count_users(self) -> int: ...

    def count_short_urls(self) -> int: ...


class URLFinder(Protocol):
    def find_urls_by_user_id(self, user_uuid: str) -> list[URL]: ...


class Deleter(Protocol):
    def delete(self, user_uuid: str, short_urls: Iterable[str]) -> None: ...


class PingHandler:
    """Checks that the storage can be reached."""

    def __init__(self, pinger: Pinger) -> None:
        self._pinger = pinger

    def check_storage_connect(self, ctx: RequestContext) -> bool:
        """Return ``True`` when the storage answers."""
        try:
            self._pinger.ping()
        except Exception as exc:
            raise StatusError(Code.INTERNAL, "no connect db") from exc
        return True


@dataclass(frozen=True)
class StatsResponse:
    """Numbers of users and short links."""

    users: int
    urls: int


class StatsHandler:
    """Reports statistics on users and links."""

    def __init__(self, finder: StatsFinder) -> None:
        self._finder = finder

    def stats(self, ctx: RequestContext) -> StatsResponse:
        """Return the current counts of users and short links."""
        try:
            users = self._finder.count_users()
        except Exception as exc:
            raise StatusError(Code.INTERNAL, "error counting users") from exc
        try:
            urls = self._finder.count_short_urls()
        except Exception as exc:
            raise StatusError(Code.INTERNAL, "error counting short urls") from exc
        return StatsResponse(users=users, urls=urls)


@dataclass(frozen=True)
class ViewItem:
    """A user's short link with its original URL."""

    short_url: str
    original_url: str


def _require_user_uuid(ctx: RequestContext) -> str:
    try:
        return fill_user_uuid(ctx)
    except StatusError as exc:
        raise StatusError(Code.INVALID_ARGUMENT, "expected userUUID") from exc


class UserURLsHandler:
    """Lists and deletes the current user's short links."""

    def __init__(
        self,
        finder: URLFinder,
        session: object,
        worker: Deleter,
        base_short_url: str = DEFAULT_BASE_SHORT_URL,
    ) -> None:
        self._finder = finder
        self._session = session
        self._worker = worker
        self._base_short_url = base_short_url

    def view(self, ctx: RequestContext) -> list[ViewItem]:
        """Return the links of the user named in the request."""
        user_uuid = _require_user_uuid(ctx)
        try:
            urls = self._finder.find_urls_by_user_id(user_uuid)
        except Exception as exc:
            raise StatusError(Code.INTERNAL, str(exc)) from exc
        if not urls:
            raise StatusError(Code.NOT_FOUND, "url not found")
        return [
            ViewItem(short_url=f"{self._base_short_url}/{url.short_url}", original_url=url.url)
            for url in urls
        ]

    def delete(self, ctx: RequestContext, short_urls: Iterable[str]) -> None:
        """Queue the user's short links for deletion."""
        user_uuid = _require_user_uuid(ctx)
        self._worker.delete(user_uuid, list(short_urls))