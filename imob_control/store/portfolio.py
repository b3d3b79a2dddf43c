"""Portfolio store: the single mutable collection of properties."""

from __future__ import annotations

import logging
import uuid
from typing import Callable, Iterable

from imob_control.exceptions import PropertyNotFoundError, StorageError
from imob_control.models import FinancialRecord, Property
from imob_control.storage.base import StorageAdapter

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]
ChangeListener = Callable[[list[Property]], None]


def _always_confirm(message: str) -> bool:
    return True


def new_property_id() -> str:
    return uuid.uuid4().hex


class PortfolioStore:
    """In-memory portfolio backed by a persistence adapter.

    Mutations apply immediately and are visible to the next read. Saving
    happens after each mutation and is best-effort: a storage failure is
    logged and the in-memory change stands.

    Parameters
    ----------
    storage : StorageAdapter
        Where the portfolio is loaded from and saved to.
    confirm : Callable[[str], bool] | None
        Asked before destructive operations (delete, restore, record
        removal). Returning False cancels the operation.
    """

    def __init__(
        self,
        storage: StorageAdapter,
        confirm: ConfirmCallback | None = None,
    ) -> None:
        self.storage = storage
        self.confirm = confirm or _always_confirm
        self._listeners: list[ChangeListener] = []
        self._properties: list[Property] = storage.load()
        logger.info(
            "Portfolio loaded with %d properties",
            len(self._properties),
            extra={"property_count": len(self._properties)},
        )

    @property
    def properties(self) -> list[Property]:
        """Current portfolio (a shallow copy of the collection)."""
        return list(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def subscribe(self, listener: ChangeListener) -> None:
        """Call ``listener`` with the portfolio after every mutation."""
        self._listeners.append(listener)

    # Property operations
    def add(self, prop: Property) -> Property:
        """Add a property at the top of the list, assigning an id if needed."""
        if not prop.id:
            prop.id = new_property_id()
        self._properties.insert(0, prop)
        logger.info("Added property %s (%s)", prop.id, prop.title, extra={"property_id": prop.id})
        self._changed()
        return prop

    def update(self, prop: Property) -> bool:
        """Replace the property with the same id. Unknown ids are ignored."""
        for i, existing in enumerate(self._properties):
            if existing.id == prop.id:
                self._properties[i] = prop
                self._changed()
                return True
        logger.debug("Update ignored, property %s not found", prop.id)
        return False

    def delete(self, property_id: str) -> bool:
        """Remove a property after confirmation. Returns whether it was removed."""
        prop = self.find(property_id)
        if prop is None:
            return False
        if not self.confirm(f"Excluir o imóvel '{prop.title}'? Esta ação não pode ser desfeita."):
            logger.info("Delete of %s cancelled", property_id, extra={"property_id": property_id})
            return False
        self._properties = [p for p in self._properties if p.id != property_id]
        logger.info("Deleted property %s", property_id, extra={"property_id": property_id})
        self._changed()
        return True

    def restore(self, properties: Iterable[Property]) -> bool:
        """Replace the whole portfolio after confirmation."""
        properties = list(properties)
        if not self.confirm(
            f"Restaurar backup com {len(properties)} imóveis? Os dados atuais serão substituídos."
        ):
            logger.info("Restore cancelled")
            return False
        self._properties = properties
        logger.info(
            "Portfolio restored with %d properties",
            len(properties),
            extra={"property_count": len(properties)},
        )
        self._changed()
        return True

    # Queries
    def find(self, property_id: str) -> Property | None:
        for prop in self._properties:
            if prop.id == property_id:
                return prop
        return None

    def get(self, property_id: str) -> Property:
        """Get a property by id."""
        prop = self.find(property_id)
        if prop is None:
            raise PropertyNotFoundError(f"Property {property_id} not found")
        return prop

    def search(self, text: str) -> list[Property]:
        """Properties whose title or address contains ``text`` (case-insensitive)."""
        needle = text.lower()
        return [
            p for p in self._properties
            if needle in p.title.lower() or needle in p.address.lower()
        ]

    # Record operations
    def add_record(self, property_id: str, record: FinancialRecord) -> Property:
        """Add a manually entered record at the top of a property's history."""
        prop = self.get(property_id)
        prop.rental_history.insert(0, record)
        self._changed()
        return prop

    def import_records(self, property_id: str, records: Iterable[FinancialRecord]) -> int:
        """Append imported records to a property's history."""
        prop = self.get(property_id)
        records = list(records)
        prop.rental_history.extend(records)
        logger.info(
            "Imported %d records into property %s",
            len(records),
            property_id,
            extra={"property_id": property_id, "record_count": len(records)},
        )
        self._changed()
        return len(records)

    def remove_record(self, property_id: str, index: int) -> bool:
        """Remove one record from a property's history after confirmation."""
        prop = self.get(property_id)
        if not 0 <= index < len(prop.rental_history):
            raise IndexError(f"Property {property_id} has no record at position {index}")
        if not self.confirm("Excluir este lançamento?"):
            return False
        del prop.rental_history[index]
        self._changed()
        return True

    def summary(self) -> dict[str, int]:
        """Return summary counts."""
        return {
            "properties": len(self._properties),
            "records": sum(len(p.rental_history) for p in self._properties),
        }

    def _changed(self) -> None:
        try:
            self.storage.save(self._properties)
        except StorageError as e:
            logger.warning("Portfolio not persisted: %s", e)
        snapshot = self.properties
        for listener in self._listeners:
            listener(snapshot)
