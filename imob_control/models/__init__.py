"""Domain models for the real-estate portfolio."""

from imob_control.models.enums import PropertyStatus, PropertyType, RecordKind
from imob_control.models.property import PLACEHOLDER_IMAGE_URL, Property
from imob_control.models.record import FinancialRecord

__all__ = [
    "FinancialRecord",
    "PLACEHOLDER_IMAGE_URL",
    "Property",
    "PropertyStatus",
    "PropertyType",
    "RecordKind",
]
