"""Backup export/restore and the debounced automatic backup."""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from imob_control.exceptions import BackupFormatError, StorageError
from imob_control.models import Property
from imob_control.storage.serialization import properties_from_list, property_to_dict

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.0"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_backup(properties: list[Property], now: datetime | None = None) -> dict[str, Any]:
    """Build the backup document for a portfolio."""
    now = now or _utcnow()
    return {
        "properties": [property_to_dict(p) for p in properties],
        "backupDate": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "version": BACKUP_VERSION,
    }


def backup_filename(now: datetime | None = None) -> str:
    """File name for a backup taken at ``now``."""
    now = now or _utcnow()
    return f"imobcontrol_backup_{now.date().isoformat()}.json"


def dump_backup(properties: list[Property], now: datetime | None = None) -> str:
    """Pretty-printed backup JSON."""
    return json.dumps(create_backup(properties, now), indent=2, ensure_ascii=False)


def write_backup(
    properties: list[Property],
    directory: str | Path,
    now: datetime | None = None,
) -> Path:
    """Write a backup file into ``directory`` and return its path."""
    now = now or _utcnow()
    directory = Path(directory)
    path = directory / backup_filename(now)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_backup(properties, now), encoding="utf-8")
    except OSError as e:
        raise StorageError(f"Cannot write backup {path}: {e}") from e
    logger.info(
        "Backup of %d properties written to %s",
        len(properties),
        path,
        extra={"property_count": len(properties), "path": str(path)},
    )
    return path


def parse_backup(text: str) -> list[Property]:
    """Read the properties out of a backup document.

    Any JSON object with a ``properties`` array is accepted; the version
    field is not checked.

    Raises
    ------
    BackupFormatError
        If the text is not JSON or has no ``properties`` array.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise BackupFormatError(f"Backup is not valid JSON: {e}") from e

    items = data.get("properties") if isinstance(data, dict) else None
    if not isinstance(items, list):
        raise BackupFormatError("Invalid backup format: missing properties array")
    return properties_from_list(items)


def read_backup(path: str | Path) -> list[Property]:
    """Read a backup file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise StorageError(f"Cannot read backup {path}: {e}") from e
    return parse_backup(text)


class AutoBackup:
    """Write a backup a fixed delay after the last portfolio change.

    Every change notification cancels the pending timer and starts a new
    one, so a burst of edits produces a single backup.
    """

    def __init__(
        self,
        backup_dir: str | Path,
        delay_seconds: float = 5.0,
        enabled: bool = True,
        timer_factory: Callable[..., Any] = threading.Timer,
    ) -> None:
        self.backup_dir = Path(backup_dir)
        self.delay_seconds = delay_seconds
        self.enabled = enabled
        self.last_backup: Path | None = None
        self._timer_factory = timer_factory
        self._timer: Any = None
        self._lock = threading.Lock()

    def notify_change(self, properties: list[Property]) -> None:
        """Schedule a backup of ``properties``, replacing any pending one."""
        with self._lock:
            self._cancel_pending()
            if not self.enabled or not properties:
                return
            snapshot = list(properties)
            self._timer = self._timer_factory(self.delay_seconds, self._run, args=(snapshot,))
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        """Drop any pending backup."""
        with self._lock:
            self._cancel_pending()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def _cancel_pending(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _run(self, properties: list[Property]) -> None:
        with self._lock:
            self._timer = None
        try:
            self.last_backup = write_backup(properties, self.backup_dir)
        except StorageError as e:
            logger.error("Automatic backup failed: %s", e)
