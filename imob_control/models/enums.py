"""Enumeration types for portfolio entities.

Values are the labels the browser application stores, so documents written
by either side stay interchangeable.
"""

from enum import Enum


class PropertyType(str, Enum):
    APARTMENT = "Apartamento"
    HOUSE = "Casa"
    COMMERCIAL = "Comercial"
    LAND = "Terreno"


class PropertyStatus(str, Enum):
    AVAILABLE = "Disponível"
    SOLD = "Vendido"
    RENTED = "Alugado"
    PENDING = "Em Negociação"


class RecordKind(str, Enum):
    REVENUE = "revenue"
    EXPENSE = "expense"
