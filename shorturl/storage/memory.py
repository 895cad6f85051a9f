"""In-memory storage of links and users."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable

from shorturl.models import URL, User
from shorturl.storage.errors import DuplicateKeyError, NotFoundError, StorageError

_DEMO_SHORT_URL = "e98192e19505472476a49f10388428ab"
_PING_TIMEOUT = 5.0


class MemoryStorage:
    """Keeps links, users and deletions in process memory."""

    def __init__(self) -> None:
        self._urls: dict[str, URL] = {
            _DEMO_SHORT_URL: URL(id=1, short_url=_DEMO_SHORT_URL, url="https://ya.ru"),
        }
        self._users: dict[int, User] = {}
        self._deleted: dict[str, datetime] = {}
        self._user_urls: dict[str, str] = {}
        self._last_url_id = 0
        self._last_user_id = 0
        self._lock = threading.RLock()

    def add(self, url: URL) -> int:
        """Store a link and return its new id."""
        with self._lock:
            if url.short_url in self._urls:
                raise DuplicateKeyError("short url already exists")
            self._last_url_id += 1
            self._urls[url.short_url] = replace(url, id=self._last_url_id)
            return self._last_url_id

    def create_user(self, user: User) -> int:
        """Store a user and return its new id."""
        with self._lock:
            self._last_user_id += 1
            self._users[self._last_user_id] = replace(user, id=self._last_user_id)
            return self._last_user_id

    def soft_delete_short_urls(self, user_uuid: str, *args: str) -> None:
        """Mark the given short links as deleted."""
        now = datetime.now(timezone.utc)
        with self._lock:
            for short_url in args:
                self._deleted[short_url] = now

    def link_url_to_user(self, url_id: int, user_uuid: str) -> None:
        """Attach every link with this id to a user."""
        with self._lock:
            for short_url, url in self._urls.items():
                if url.id == url_id:
                    self._user_urls[short_url] = user_uuid

    def multi_add(self, urls: Iterable[URL]) -> None:
        """Store many links, replacing any existing entries for the same URL."""
        with self._lock:
            for url in urls:
                self._remove_by_url(url.url)
                try:
                    self.add(url)
                except DuplicateKeyError:
                    pass

    def _remove_by_url(self, original: str) -> None:
        for short_url in [key for key, value in self._urls.items() if value.url == original]:
            del self._urls[short_url]

    def find_by_short_url(self, short_url: str) -> URL:
        """Return the link for a short key, with its deletion time if any."""
        with self._lock:
            try:
                url = self._urls[short_url]
            except KeyError:
                raise NotFoundError("the short link was not found") from None
            return replace(url, deleted_at=self._deleted.get(short_url, url.deleted_at))

    def find_by_url(self, url: str) -> URL:
        """Return the first link stored for an original URL."""
        with self._lock:
            for model in self._urls.values():
                if model.url == url:
                    return replace(model)
        raise NotFoundError("the url link was not found")

    def ping(self) -> None:
        """Raise ``StorageError`` if the storage stays locked too long."""
        if not self._lock.acquire(timeout=_PING_TIMEOUT):
            raise StorageError("memory storage is not available")
        self._lock.release()

    def find_user_by_login_and_password_hash(self, login: str, password: str) -> User | None:
        """Return the user with these credentials, or ``None``."""
        with self._lock:
            for user in self._users.values():
                if user.login == login and user.password == password:
                    return replace(user)
        return None

    def find_urls_by_user_id(self, user_uuid: str) -> list[URL]:
        """Return the links attached to a user."""
        with self._lock:
            return [
                replace(self._urls[short_url])
                for short_url, owner in self._user_urls.items()
                if owner == user_uuid and short_url in self._urls
            ]

    def count_short_urls(self) -> int:
        """Return the number of stored links."""
        with self._lock:
            return len(self._urls)

    def count_users(self) -> int:
        """Return the number of stored users."""
        with self._lock:
            return len(self._users)