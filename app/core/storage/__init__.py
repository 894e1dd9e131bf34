from app.core.storage.base import ContactStore
from app.core.storage.file_store import FileContactStore
from app.core.storage.relational_store import RelationalContactStore
from app.infrastructure.config.config import STORAGE_CONFIG, StorageConfig
from app.infrastructure.database.adapters.pg_connection import DatabaseConnection
from app.utils.enums import StorageBackendEnum


def build_contact_store(
    config: StorageConfig = STORAGE_CONFIG,
    database_url: str | None = None,
) -> ContactStore:
    if config.BACKEND == StorageBackendEnum.FILE:
        return FileContactStore(config.CONTACTS_FILE)
    if config.BACKEND == StorageBackendEnum.DATABASE:
        return RelationalContactStore(DatabaseConnection(database_url))
    raise ValueError(f"Unknown storage backend: {config.BACKEND}")


__all__ = [
    "ContactStore",
    "FileContactStore",
    "RelationalContactStore",
    "build_contact_store",
]
