# shorturl

The core of a URL shortening service: data models, interchangeable
storages, a background worker that soft-deletes a user's links, and the
request handlers that sit on top of them.

## What is inside

- `shorturl.models` – the `URL` and `User` dataclasses and their one-line
  JSON encoding (`url_to_json`, `url_from_json`, `user_to_json`,
  `user_from_json`). A link's `deleted_at` is `None` while it is live.
- `shorturl.passwords` – `password_hash`, the hex SHA-256 digest of a
  password.
- `shorturl.storage` – storages with the same set of operations:
  - `shorturl.storage.memory.MemoryStorage`, kept in process memory and
    seeded with one demo link;
  - `shorturl.storage.file.FileStorage`, which appends one JSON link per
    line to a file, users to `<path>user.json` and deletions to
    `<path>deleted-urls.json`; it can be used as a context manager;
  - `shorturl.storage.postgres.PostgresStorage`, which runs its queries
    through a DB-API connection you pass in (the connection must use the
    `%s` parameter style);
  - `shorturl.storage.session.SessionStorage`, a small thread-safe map of
    session keys to user identifiers (`add`, `get`, `get_all`).

  Failures are raised as `StorageError` and its subclasses
  `DuplicateKeyError` and `NotFoundError` from `shorturl.storage.errors`.
- `shorturl.workers` – `DeleteWorker`, which runs a storage's
  `soft_delete_short_urls` on background threads for links queued with
  `delete(user_uuid, short_urls)` until `stop()` is called (or the `with`
  block ends).
- `shorturl.rpc` – the request layer:
  - `shorturl.rpc.context`: `RequestContext` carries request metadata
    (keys are case-insensitive); `fill_user_uuid`, `get_user_token` and
    `append_metadata` read and update it; failures are raised as
    `StatusError` carrying a `Code`;
  - `shorturl.rpc.handlers`: `PingHandler.check_storage_connect`,
    `StatsHandler.stats` (returns a `StatsResponse`) and
    `UserURLsHandler.view` / `UserURLsHandler.delete` (view returns
    `ViewItem`s whose short links are prefixed with `base_short_url`,
    `http://localhost:8080` by default);
  - `shorturl.rpc.logging_interceptor`: `RequestLogger.log_start` records
    the start time in the metadata and logs the request;
    `RequestLogger.log_end` logs the elapsed time.

## Storage operations

| method | purpose |
| --- | --- |
| `add(url)` | store a link and return its id |
| `multi_add(urls)` | store several links at once |
| `create_user(user)` | store a user |
| `link_url_to_user(url_id, user_uuid)` | record which user created a link |
| `find_by_short_url(short_url)` | look a link up by its short form |
| `find_by_url(url)` | look a link up by the original address |
| `find_urls_by_user_id(user_uuid)` | all links of one user |
| `find_user_by_login_and_password_hash(login, password)` | find a user |
| `soft_delete_short_urls(user_uuid, *short_urls)` | mark links deleted |
| `count_short_urls()` / `count_users()` | statistics |
| `ping()` | raise if the storage cannot be reached |

The storages differ at the edges:

- `MemoryStorage.add` raises `DuplicateKeyError` for a short link that is
  already stored; its `find_by_short_url` and `find_by_url` raise
  `NotFoundError` when nothing matches.
- `FileStorage.find_by_short_url` raises `NotFoundError`, while its
  `find_by_url` returns an empty `URL()`. Its links attached with
  `link_url_to_user` are kept only for the life of the object, and
  recorded deletions are not reflected in lookups.
- `PostgresStorage` returns an empty `URL()` or `User()` when a lookup
  finds nothing, and raises `DuplicateKeyError` when the database reports
  a duplicate key on `add`.

## Example

```python
from shorturl.models import URL, User
from shorturl.passwords import password_hash
from shorturl.storage.memory import MemoryStorage

storage = MemoryStorage()

user_uuid = "1111-2222-3333-4444"
password = "password"
hashed = password_hash(password)
storage.create_user(User(login="cat", password=hashed, uuid=user_uuid))

url_id = storage.add(URL(short_url="abc123", url="https://example.com/page"))
storage.link_url_to_user(url_id, user_uuid)

print(storage.find_by_short_url("abc123").url)   # https://example.com/page
print([u.short_url for u in storage.find_urls_by_user_id(user_uuid)])
print(storage.count_short_urls())                # 2, counting the demo link
```

## What this package does not do

It is a library only. It has no command to run, no HTTP or RPC server,
and no configuration loading. It does not create database tables or run
migrations, and it does not ship a PostgreSQL driver: `PostgresStorage`
works with whatever DB-API connection you give it. Shortening an address
(choosing the short key) is left to the caller.