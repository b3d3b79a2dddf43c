"""Conversion between portfolio models and their JSON document form.

Documents use the browser application's camelCase field names so a backup
exported there restores here and vice versa.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, TypeVar

from imob_control.ingest import records_from_raw
from imob_control.models import (
    PLACEHOLDER_IMAGE_URL,
    FinancialRecord,
    Property,
    PropertyStatus,
    PropertyType,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output.

    Decimals become plain JSON numbers so documents stay readable by the
    browser application: whole values as ints, fractional values as floats.
    A fractional amount keeps at most 15 significant digits; cents on any
    realistic amount survive the round trip exactly.
    """
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def record_to_dict(record: FinancialRecord) -> dict[str, Any]:
    """Convert a record to its document form."""
    data: dict[str, Any] = {
        "date": record.date,
        "amount": serialize_value(record.amount),
        "description": record.description,
        "type": record.kind.value,
    }
    if record.check_in is not None:
        data["checkIn"] = record.check_in
    if record.check_out is not None:
        data["checkOut"] = record.check_out
    return data


def property_to_dict(prop: Property) -> dict[str, Any]:
    """Convert a property to its document form."""
    return {
        "id": prop.id,
        "title": prop.title,
        "description": prop.description,
        "price": serialize_value(prop.price),
        "type": prop.type.value,
        "status": prop.status.value,
        "address": prop.address,
        "consumerUnit": prop.consumer_unit,
        "bedrooms": prop.bedrooms,
        "bathrooms": prop.bathrooms,
        "area": prop.area,
        "imageUrl": prop.image_url,
        "features": list(prop.features),
        "rentalHistory": [record_to_dict(r) for r in prop.rental_history],
    }


def _coerce_enum(enum_cls: type[E], value: Any, default: E) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        pass
    if isinstance(value, str) and value.upper() in enum_cls.__members__:
        return enum_cls[value.upper()]
    if value is not None:
        logger.warning("Unknown %s %r, using %s", enum_cls.__name__, value, default.name)
    return default


def _coerce_decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return number if number.is_finite() else Decimal("0")


def _coerce_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _coerce_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def property_from_dict(data: dict[str, Any]) -> Property:
    """Build a property from its document form.

    Missing fields take the same defaults as a freshly created property.
    Records that are not objects are dropped; records with a non-numeric
    amount are kept with ``amount=None``.
    """
    defaults = Property(id="")
    features = data.get("features") or []
    return Property(
        id=str(data.get("id") or ""),
        title=str(data.get("title", defaults.title)),
        description=str(data.get("description", defaults.description)),
        address=str(data.get("address", defaults.address)),
        consumer_unit=str(data.get("consumerUnit") or ""),
        price=_coerce_decimal(data.get("price")),
        type=_coerce_enum(PropertyType, data.get("type"), defaults.type),
        status=_coerce_enum(PropertyStatus, data.get("status"), defaults.status),
        bedrooms=_coerce_int(data.get("bedrooms")),
        bathrooms=_coerce_int(data.get("bathrooms")),
        area=_coerce_float(data.get("area")),
        image_url=str(data.get("imageUrl") or PLACEHOLDER_IMAGE_URL),
        features=[str(f) for f in features] if isinstance(features, list) else [],
        rental_history=records_from_raw(data.get("rentalHistory") or [], keep_invalid=True),
    )


def properties_to_document(properties: list[Property]) -> dict[str, Any]:
    """Wrap properties in the ``{"properties": [...]}`` storage document."""
    return {"properties": [property_to_dict(p) for p in properties]}


def properties_from_list(items: list[Any]) -> list[Property]:
    """Build properties from a document's ``properties`` array."""
    properties = []
    for item in items:
        if not isinstance(item, dict):
            logger.warning("Skipping non-object property entry: %r", item)
            continue
        properties.append(property_from_dict(item))
    return properties
