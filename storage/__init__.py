from .base import StorageBackend
from .json_store import JsonFileStorage
from .sqlite_store import SqliteStorage


def create_storage(settings) -> StorageBackend:
    """按配置选择存储后端"""
    if settings.storage_backend == "sqlite":
        return SqliteStorage(db_path=settings.db_path)
    return JsonFileStorage(data_dir=settings.data_dir)


__all__ = ["StorageBackend", "JsonFileStorage", "SqliteStorage", "create_storage"]
