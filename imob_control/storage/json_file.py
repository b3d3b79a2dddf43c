"""JSON file storage for the portfolio."""

import json
import logging
from pathlib import Path

from imob_control.exceptions import StorageError
from imob_control.models import Property
from imob_control.storage.serialization import properties_from_list, properties_to_document

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Persist the portfolio as a ``{"properties": [...]}`` JSON document."""

    def __init__(
        self,
        data_dir: str | Path,
        storage_key: str = "imobcontrol_data",
        namespace: str | None = None,
        pretty: bool = False,
    ) -> None:
        """Initialize JSON file storage.

        Parameters
        ----------
        data_dir : str | Path
            Directory holding the storage file.
        storage_key : str
            Base name of the storage file.
        namespace : str | None
            Optional suffix isolating one user's portfolio.
        pretty : bool
            Pretty-print JSON output.
        """
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.storage_key = storage_key
        self.namespace = namespace
        self.pretty = pretty

    @property
    def file_path(self) -> Path:
        name = f"{self.storage_key}_{self.namespace}" if self.namespace else self.storage_key
        return self.data_dir / f"{name}.json"

    def load(self) -> list[Property]:
        """Read the portfolio; a missing file is an empty portfolio."""
        if not self.file_path.exists():
            return []
        try:
            with open(self.file_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read {self.file_path}: {e}") from e

        items = data.get("properties") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise StorageError(f"{self.file_path} has no properties array")

        properties = properties_from_list(items)
        logger.debug("Loaded %d properties from %s", len(properties), self.file_path)
        return properties

    def save(self, properties: list[Property]) -> None:
        """Write the portfolio, replacing the previous document."""
        document = properties_to_document(properties)
        tmp_path = self.file_path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(document, f, indent=2, ensure_ascii=False)
                else:
                    json.dump(document, f, ensure_ascii=False)
            tmp_path.replace(self.file_path)
        except OSError as e:
            raise StorageError(f"Cannot write {self.file_path}: {e}") from e
        logger.debug("Saved %d properties to %s", len(properties), self.file_path)
