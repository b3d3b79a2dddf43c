"""Property model for the portfolio."""

from dataclasses import dataclass, field
from decimal import Decimal

from imob_control.models.enums import PropertyStatus, PropertyType
from imob_control.models.record import FinancialRecord

PLACEHOLDER_IMAGE_URL = "https://picsum.photos/800/600"


@dataclass
class Property:
    """Real-estate unit tracked by the portfolio."""

    id: str
    title: str = "Novo Imóvel"
    description: str = "Descrição pendente."
    address: str = "Endereço a definir"
    consumer_unit: str = ""  # Utility consumer-unit number
    price: Decimal = Decimal("0")
    type: PropertyType = PropertyType.APARTMENT
    status: PropertyStatus = PropertyStatus.AVAILABLE
    bedrooms: int = 0
    bathrooms: int = 0
    area: float = 0.0  # Square meters
    image_url: str = PLACEHOLDER_IMAGE_URL
    features: list[str] = field(default_factory=list)
    rental_history: list[FinancialRecord] = field(default_factory=list)

    def total_revenue(self) -> Decimal:
        """Sum of revenue records, ignoring any date filter."""
        return sum(
            (r.amount for r in self.rental_history if not r.is_expense and r.amount is not None),
            Decimal("0"),
        )

    def balance(self) -> Decimal:
        """Revenue minus expenses over the whole history."""
        return sum((r.signed_amount for r in self.rental_history), Decimal("0"))
