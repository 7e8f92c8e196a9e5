from retro_writing.client.api import ApiError, DocumentApiClient
from retro_writing.client.storage import (
    JsonFileStore, KeyValueStore, MemoryStore,
    clear_local, load_from_local, remove_from_local, save_to_local
)
from retro_writing.client.sync import DocumentSyncController, SyncState

__all__ = [
    "ApiError", "DocumentApiClient",
    "JsonFileStore", "KeyValueStore", "MemoryStore",
    "clear_local", "load_from_local", "remove_from_local", "save_to_local",
    "DocumentSyncController", "SyncState",
]
