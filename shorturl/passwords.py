"""Password hashing."""

import hashlib


def password_hash(password: str) -> str:
    """Return the hex SHA-256 digest of a password."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()