"""Errors raised by the storages."""

CODE_ERROR_DUPLICATE_KEY = "23505"


class StorageError(Exception):
    """Base class for storage failures."""


class DuplicateKeyError(StorageError):
    """A record with the same unique key already exists."""

    code = CODE_ERROR_DUPLICATE_KEY

    def __init__(self, message: str = "duplicate key") -> None:
        super().__init__(message)


class NotFoundError(StorageError, LookupError):
    """The requested record does not exist."""