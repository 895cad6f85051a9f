"""Storage of links and users in a PostgreSQL database."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Sequence

from shorturl.models import URL, User
from shorturl.storage.errors import CODE_ERROR_DUPLICATE_KEY, DuplicateKeyError

log = logging.getLogger(__name__)

_INSERT_URL = "insert into url_list (short_url, url) values (%s, %s) returning id"
_INSERT_USER = (
    "insert into users (name, login, password, uuid) values (%s, %s, %s, %s) "
    "ON CONFLICT (uuid) DO UPDATE SET uuid = excluded.uuid returning id"
)
_LINK_URL_TO_USER = (
    "insert into user_short_url (user_id, url_id) "
    "values ((select id from users where uuid=%s limit 1), %s)"
)
_FIND_BY_SHORT_URL = (
    "select id, short_url, url, deleted_at from url_list where short_url = %s limit 1"
)
_FIND_BY_URL = (
    "select id, short_url, url from url_list where url = %s and deleted_at is null limit 1"
)
_PING = "select 1"
_MULTI_INSERT_URL = (
    "insert into url_list (short_url, url) values (%s, %s) "
    "ON CONFLICT (url) where deleted_at IS NULL DO NOTHING"
)
_FIND_USER = (
    "select id, name, login, password from users "
    "where login = %s and password = %s and deleted_at is null limit 1"
)
_FIND_USER_URLS = (
    "select ul.id, ul.short_url, ul.url from url_list as ul "
    "left join user_short_url as usu on usu.url_id=ul.id "
    "where usu.user_id=(select id from users where uuid=%s limit 1) order by ul.id asc"
)
_SOFT_DELETE = (
    "update url_list set deleted_at=now() where short_url = ANY(%s) "
    "and id in (select uu.url_id from user_short_url as uu where uu.user_id = "
    "(select us.id from users as us where us.uuid=%s limit 1))"
)
_COUNT_URLS = "select count(*) as cnt from url_list"
_COUNT_USERS = "select count(*) as cnt from users"


def _is_duplicate_key(exc: BaseException) -> bool:
    code = getattr(exc, "pgcode", None) or getattr(exc, "sqlstate", None)
    return code == CODE_ERROR_DUPLICATE_KEY


class PostgresStorage:
    """Keeps links and users in PostgreSQL through a DB-API connection.

    The connection must use the ``format`` parameter style (``%s``).
    """

    def __init__(self, connection: Any) -> None:
        self.connection = connection

    @contextmanager
    def _cursor(self) -> Iterator[Any]:
        cursor = self.connection.cursor()
        try:
            yield cursor
        finally:
            cursor.close()

    def _rollback(self) -> None:
        try:
            self.connection.rollback()
        except Exception:
            log.exception("rollback failed")

    def _write(self, query: str, params: Sequence[Any]) -> None:
        try:
            with self._cursor() as cursor:
                cursor.execute(query, params)
            self.connection.commit()
        except Exception:
            self._rollback()
            raise

    def _fetchone(self, query: str, params: Sequence[Any] = ()) -> Sequence[Any] | None:
        with self._cursor() as cursor:
            cursor.execute(query, params)
            return cursor.fetchone()

    def _count(self, query: str) -> int:
        row = self._fetchone(query)
        return int(row[0]) if row else 0

    def add(self, url: URL) -> int:
        """Insert a link and return its database id."""
        try:
            with self._cursor() as cursor:
                cursor.execute(_INSERT_URL, (url.short_url, url.url))
                row = cursor.fetchone()
            self.connection.commit()
        except Exception as exc:
            self._rollback()
            if _is_duplicate_key(exc):
                raise DuplicateKeyError("short url already exists") from exc
            raise
        return int(row[0]) if row else 0

    def create_user(self, user: User) -> int:
        """Insert a user, keeping an existing one with the same uuid."""
        self._write(_INSERT_USER, (user.name, user.login, user.password, user.uuid))
        return 0

    def link_url_to_user(self, url_id: int, user_uuid: str) -> None:
        """Attach a link to the user with the given uuid."""
        try:
            self._write(_LINK_URL_TO_USER, (user_uuid, url_id))
        except Exception as exc:
            log.error("failed to link url %s to user %s: %s", url_id, user_uuid, exc)
            raise

    def find_by_short_url(self, short_url: str) -> URL:
        """Return the link for a short key, or an empty link if there is none."""
        row = self._fetchone(_FIND_BY_SHORT_URL, (short_url,))
        if row is None:
            return URL()
        url_id, short, original, deleted_at = row
        return URL(id=int(url_id), short_url=short, url=original, deleted_at=deleted_at)

    def find_by_url(self, url: str) -> URL:
        """Return the live link for an original URL, or an empty link."""
        row = self._fetchone(_FIND_BY_URL, (url,))
        if row is None:
            return URL()
        url_id, short, original = row
        return URL(id=int(url_id), short_url=short, url=original)

    def ping(self) -> None:
        """Raise if the database cannot be reached."""
        self._fetchone(_PING)

    def multi_add(self, urls: Iterable[URL]) -> None:
        """Insert many links in one transaction, skipping live duplicates."""
        try:
            with self._cursor() as cursor:
                for url in urls:
                    try:
                        cursor.execute(_MULTI_INSERT_URL, (url.short_url, url.url))
                    except Exception:
                        log.error("value %r was not added to url_list", url)
                        raise
            self.connection.commit()
        except Exception:
            self._rollback()
            raise

    def find_user_by_login_and_password_hash(self, login: str, password_hash: str) -> User:
        """Return the user with these credentials, or an empty user."""
        row = self._fetchone(_FIND_USER, (login, password_hash))
        if row is None:
            return User()
        user_id, name, user_login, password = row
        return User(id=int(user_id), name=name, login=user_login, password=password)

    def find_urls_by_user_id(self, user_uuid: str) -> list[URL]:
        """Return a user's links ordered by id."""
        with self._cursor() as cursor:
            cursor.execute(_FIND_USER_URLS, (user_uuid,))
            rows = cursor.fetchall()
        return [URL(id=int(url_id), short_url=short, url=original) for url_id, short, original in rows]

    def soft_delete_short_urls(self, user_uuid: str, *args: str) -> None:
        """Mark the user's given short links as deleted."""
        self._write(_SOFT_DELETE, (list(args), user_uuid))

    def count_short_urls(self) -> int:
        """Return the number of stored links."""
        return self._count(_COUNT_URLS)

    def count_users(self) -> int:
        """Return the number of stored users."""
        return self._count(_COUNT_USERS)