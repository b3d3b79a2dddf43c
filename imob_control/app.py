"""Session wiring: turn an :class:`AppConfig` and a login into live objects."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable

import httpx

from imob_control.ai import AIGateway, ChatSession, GeminiClient
from imob_control.auth import authenticate, storage_for_user
from imob_control.config import AppConfig
from imob_control.storage import AutoBackup
from imob_control.store import PortfolioStore
from imob_control.store.portfolio import ConfirmCallback

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Everything a logged-in user works with."""

    username: str
    config: AppConfig
    store: PortfolioStore
    gateway: AIGateway
    chat: ChatSession
    auto_backup: AutoBackup | None = None

    def close(self) -> None:
        """Drop any pending backup and release the HTTP client."""
        if self.auto_backup is not None:
            self.auto_backup.cancel()
        self.gateway.client.close()


def build_gateway(config: AppConfig, http_client: httpx.Client | None = None) -> AIGateway:
    return AIGateway(GeminiClient(config.gemini, http_client=http_client))


def build_auto_backup(
    config: AppConfig,
    timer_factory: Callable[..., Any] = threading.Timer,
) -> AutoBackup | None:
    """Debounced backup writer, or None when ``AUTO_BACKUP`` is off."""
    if not config.backup.auto_backup:
        return None
    return AutoBackup(
        config.backup.backup_dir,
        delay_seconds=config.backup.delay_seconds,
        timer_factory=timer_factory,
    )


def open_session(
    config: AppConfig,
    username: str,
    confirm: ConfirmCallback | None = None,
    *,
    http_client: httpx.Client | None = None,
    timer_factory: Callable[..., Any] = threading.Timer,
) -> Session:
    """Build the store, assistant and auto-backup for ``username``.

    Parameters
    ----------
    config : AppConfig
        Application configuration.
    username : str
        Logged-in user; namespaces the storage file.
    confirm : Callable[[str], bool] | None
        Confirmation prompt for destructive store operations.
    http_client : httpx.Client | None
        HTTP client for the model API (a new one by default).
    timer_factory : Callable
        Timer class for the auto-backup debounce.
    """
    store = PortfolioStore(storage_for_user(config, username), confirm=confirm)
    auto_backup = build_auto_backup(config, timer_factory)
    if auto_backup is not None:
        store.subscribe(auto_backup.notify_change)

    gateway = build_gateway(config, http_client)
    logger.info(
        "Session opened for %s (auto-backup %s)",
        username,
        "on" if auto_backup else "off",
        extra={"username": username, "property_count": len(store)},
    )
    return Session(
        username=username,
        config=config,
        store=store,
        gateway=gateway,
        chat=ChatSession(gateway),
        auto_backup=auto_backup,
    )


def login(
    config: AppConfig,
    username: str,
    password: str,
    confirm: ConfirmCallback | None = None,
    **kwargs: Any,
) -> Session | None:
    """Authenticate against the configured users and open their session."""
    user = authenticate(username, password, config.users)
    if user is None:
        return None
    return open_session(config, user, confirm, **kwargs)
