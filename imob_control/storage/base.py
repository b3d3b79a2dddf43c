"""Persistence adapter interface and the in-memory implementation."""

from __future__ import annotations

import copy
from typing import Protocol

from imob_control.models import Property


class StorageAdapter(Protocol):
    """Where the portfolio lives between sessions."""

    def load(self) -> list[Property]:
        """Return the persisted portfolio, empty when nothing was saved."""
        ...

    def save(self, properties: list[Property]) -> None:
        """Persist the full portfolio, replacing what was there."""
        ...


class InMemoryStorage:
    """Storage that keeps a private copy of the portfolio in memory."""

    def __init__(self, properties: list[Property] | None = None) -> None:
        self._properties = copy.deepcopy(properties or [])
        self.save_count = 0

    def load(self) -> list[Property]:
        return copy.deepcopy(self._properties)

    def save(self, properties: list[Property]) -> None:
        self._properties = copy.deepcopy(properties)
        self.save_count += 1
