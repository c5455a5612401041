"""Persistence and media collaborators."""

from live_grouping.backends.base import MediaBackend, PersistenceBackend
from live_grouping.backends.json_file import JsonFileBackend
from live_grouping.backends.media import LocalMediaStore
from live_grouping.backends.memory import InMemoryBackend

__all__ = [
    "InMemoryBackend",
    "JsonFileBackend",
    "LocalMediaStore",
    "MediaBackend",
    "PersistenceBackend",
]
