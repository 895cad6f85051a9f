"""Storage of links in a JSON-lines file."""

from __future__ import annotations

import json
import logging
import os
import threading
from datetime import datetime, timezone
from typing import Iterable

from shorturl.models import (
    URL,
    User,
    url_from_json,
    url_to_json,
    user_from_json,
    user_to_json,
)
from shorturl.storage.errors import NotFoundError

log = logging.getLogger(__name__)


class FileStorage:
    """Appends links to a file and keeps their lines in memory for lookup.

    Users go to a companion file named ``<path>user.json``; deletions are
    recorded in ``<path>deleted-urls.json``.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = os.fspath(path)
        self._lock = threading.Lock()
        self._file = open(self.path, "a+", encoding="utf-8")
        try:
            self._users_path = self.path + "user.json"
            self._users = open(self._users_path, "a", encoding="utf-8")
            self._deleted_path = self.path + "deleted-urls.json"
            self._deleted_urls = open(self._deleted_path, "a", encoding="utf-8")
        except OSError:
            self._file.close()
            raise
        self._file.seek(0)
        self._cache: list[str] = [line.rstrip("\n") for line in self._file]
        self._user_urls: dict[str, list[URL]] = {}

    def __enter__(self) -> FileStorage:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def add(self, url: URL) -> int:
        """Append a link to the file."""
        line = url_to_json(url)
        with self._lock:
            self._cache.append(line)
            try:
                self._file.write(line + "\n")
                self._file.flush()
            except OSError:
                log.error("failed to write %s to %s", line, self.path)
        return 1

    def create_user(self, user: User) -> int:
        """Append a user to the users file."""
        line = user_to_json(user)
        with self._lock:
            try:
                self._users.write(line + "\n")
                self._users.flush()
            except OSError:
                log.error("failed to write %s to %s", line, self._users_path)
        return 0

    def link_url_to_user(self, url_id: int, user_uuid: str) -> None:
        """Attach the stored links with this id to a user for this session."""
        with self._lock:
            lines = list(self._cache)
        matches = []
        for line in lines:
            try:
                url = url_from_json(line)
            except (ValueError, TypeError, KeyError):
                continue
            if url.id == url_id:
                matches.append(url)
        with self._lock:
            self._user_urls.setdefault(user_uuid, []).extend(matches)

    def multi_add(self, urls: Iterable[URL]) -> None:
        """Append many links."""
        for url in urls:
            self.add(url)

    def soft_delete_short_urls(self, user_uuid: str, *args: str) -> None:
        """Record deletion of the given short links in the deletions file."""
        stamp = datetime.now(timezone.utc).isoformat()
        records = [
            json.dumps(
                {"user_uuid": user_uuid, "short_url": short_url, "deleted_at": stamp},
                ensure_ascii=False,
            )
            for short_url in args
        ]
        with self._lock:
            try:
                for record in records:
                    self._deleted_urls.write(record + "\n")
                self._deleted_urls.flush()
            except OSError:
                log.error("failed to write deletions to %s", self._deleted_path)

    def _find_line(self, value: str) -> str | None:
        needle = json.dumps(value, ensure_ascii=False)
        with self._lock:
            return next((line for line in self._cache if needle in line), None)

    def find_by_short_url(self, short_url: str) -> URL:
        """Return the first stored link that mentions this short key."""
        line = self._find_line(short_url)
        if line is None:
            raise NotFoundError("the short link was not found")
        return url_from_json(line)

    def find_by_url(self, url: str) -> URL:
        """Return the first stored link for a URL, or an empty link."""
        line = self._find_line(url)
        return URL() if line is None else url_from_json(line)

    def find_user_by_login_and_password_hash(self, login: str, password: str) -> User | None:
        """Return the first user in the users file with these credentials."""
        with self._lock:
            if not self._users.closed:
                self._users.flush()
        with open(self._users_path, encoding="utf-8") as users:
            for line in users:
                line = line.strip()
                if not line:
                    continue
                try:
                    user = user_from_json(line)
                except (ValueError, TypeError, KeyError):
                    continue
                if user.login == login and user.password == password:
                    return user
        return None

    def find_urls_by_user_id(self, user_uuid: str) -> list[URL]:
        """Return the links attached to a user in this session."""
        with self._lock:
            return list(self._user_urls.get(user_uuid, []))

    def close(self) -> None:
        """Close every open file."""
        for handle in (self._file, self._users, self._deleted_urls):
            handle.close()

    def ping(self) -> None:
        """Raise ``OSError`` if the storage file is gone."""
        os.stat(self.path)

    def count_short_urls(self) -> int:
        """Return the number of stored links."""
        with self._lock:
            return len(self._cache)

    def count_users(self) -> int:
        """Return the number of lines in the users file."""
        with self._lock:
            if not self._users.closed:
                self._users.flush()
        with open(self._users_path, encoding="utf-8") as users:
            return sum(1 for _ in users)