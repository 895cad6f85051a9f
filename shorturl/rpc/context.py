"""Request metadata, status codes and helpers for RPC handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Mapping, Union

USER_UUID = "userUUID"
AUTHORIZATION = "authorization"
REQUEST_TIME = "requestTime"

_MetadataValue = Union[str, Iterable[str]]


class Code(IntEnum):
    """Status codes of an RPC call."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


class StatusError(Exception):
    """An RPC call failed with a status code and message."""

    def __init__(self, code: Code, message: str = "") -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"StatusError({self.code.name}, {self.message!r})"


def _values(value: _MetadataValue) -> list[str]:
    if isinstance(value, str):
        return [value]
    return list(value)


@dataclass
class RequestContext:
    """Incoming metadata of a request; ``None`` means no metadata at all.

    Keys are case-insensitive and stored in lower case.
    """

    metadata: Mapping[str, _MetadataValue] | None = None
    _store: dict[str, list[str]] | None = field(init=False, repr=False, default=None)

    def __post_init__(self) -> None:
        if self.metadata is not None:
            self._store = {key.lower(): _values(value) for key, value in self.metadata.items()}
            self.metadata = self._store

    @property
    def has_metadata(self) -> bool:
        return self._store is not None

    def get(self, key: str) -> list[str]:
        """Return the values stored under a key, or an empty list."""
        if self._store is None:
            return []
        return list(self._store.get(key.lower(), []))


def fill_user_uuid(ctx: RequestContext) -> str:
    """Return the user's uuid from the request metadata."""
    if not ctx.has_metadata:
        raise StatusError(Code.UNAUTHENTICATED, "missing metadata")
    values = ctx.get(USER_UUID)
    if not values:
        raise StatusError(Code.INVALID_ARGUMENT, "expected " + USER_UUID)
    return values[0]


def get_user_token(ctx: RequestContext) -> str:
    """Return the authorization token of the request, or an empty string."""
    values = ctx.get(AUTHORIZATION)
    return values[0] if values else ""


def append_metadata(ctx: RequestContext, key: str, value: str) -> RequestContext:
    """Return a new context whose metadata holds exactly ``value`` under ``key``."""
    store = {} if ctx.metadata is None else {k: list(v) for k, v in ctx.metadata.items()}
    store[key.lower()] = [value]
    return RequestContext(store)