from enum import Enum


class ContactStatusEnum(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    COMPLETED = "completed"


class StorageBackendEnum(str, Enum):
    FILE = "file"
    DATABASE = "database"
