"""Persistence adapters and backup files for the portfolio."""

from imob_control.storage.backup import (
    AutoBackup,
    backup_filename,
    create_backup,
    dump_backup,
    parse_backup,
    read_backup,
    write_backup,
)
from imob_control.storage.base import InMemoryStorage, StorageAdapter
from imob_control.storage.json_file import JsonFileStorage

__all__ = [
    "AutoBackup",
    "InMemoryStorage",
    "JsonFileStorage",
    "StorageAdapter",
    "backup_filename",
    "create_backup",
    "dump_backup",
    "parse_backup",
    "read_backup",
    "write_backup",
]
