"""URL shortening service core: models, storages, a deletion worker and request handlers."""

__version__ = "0.1.0"