"""Login against the configured allow-list of users.

Credentials are compared as plain strings. The logged-in username becomes
the storage namespace so each user keeps a separate portfolio.
"""

import logging
from pathlib import Path

from imob_control.config import AppConfig
from imob_control.storage.json_file import JsonFileStorage

logger = logging.getLogger(__name__)


def authenticate(username: str, password: str, users: dict[str, str]) -> str | None:
    """Return the normalized username when the credentials match."""
    key = username.strip().lower()
    allowed = {name.lower(): secret for name, secret in users.items()}
    if key and allowed.get(key) == password:
        logger.info("User %s logged in", key)
        return key
    logger.warning("Failed login for %r", username)
    return None


def storage_for_user(config: AppConfig, username: str | None) -> JsonFileStorage:
    """JSON storage namespaced by the logged-in user."""
    return JsonFileStorage(
        Path(config.storage.data_dir),
        storage_key=config.storage.storage_key,
        namespace=username,
    )
