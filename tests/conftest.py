"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from imob_control.models import (
    FinancialRecord,
    Property,
    PropertyStatus,
    PropertyType,
    RecordKind,
)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def today() -> date:
    """Reference day inside November 2025."""
    return date(2025, 11, 15)


@pytest.fixture
def stay_record() -> FinancialRecord:
    """Four-night stay in November 2025."""
    return FinancialRecord(
        date="02/11/2025",
        amount=Decimal("1200"),
        description="Diária Airbnb",
        kind=RecordKind.REVENUE,
        check_in="02/11/2025",
        check_out="06/11/2025",
    )


@pytest.fixture
def sample_property(stay_record: FinancialRecord) -> Property:
    """Apartment with one stay and one expense."""
    return Property(
        id="prop-001",
        title="Studio Compacto Centro",
        description="Studio mobiliado próximo ao metrô.",
        address="Av. Ipiranga, São Paulo, SP",
        consumer_unit="55443322",
        price=Decimal("450000"),
        type=PropertyType.APARTMENT,
        status=PropertyStatus.RENTED,
        bedrooms=1,
        bathrooms=1,
        area=35.0,
        image_url="https://picsum.photos/800/600?random=3",
        features=["Mobiliado", "Coworking"],
        rental_history=[
            stay_record,
            FinancialRecord(
                date="10/10/2025",
                amount=Decimal("120"),
                description="Reparo Chuveiro",
                kind=RecordKind.EXPENSE,
            ),
        ],
    )


@pytest.fixture
def second_property() -> Property:
    """House with rent received in October and November 2025."""
    return Property(
        id="prop-002",
        title="Casa Modernista no Morumbi",
        address="Rua das Flores, São Paulo, SP",
        price=Decimal("3200000"),
        type=PropertyType.HOUSE,
        status=PropertyStatus.PENDING,
        bedrooms=5,
        bathrooms=6,
        area=550.0,
        rental_history=[
            FinancialRecord(date="01/11/2025", amount=Decimal("2500"), description="Aluguel Mensal"),
            FinancialRecord(date="01/10/2025", amount=Decimal("2500"), description="Aluguel Mensal"),
            FinancialRecord(
                date="20/10/2025",
                amount=Decimal("350"),
                description="Manutenção Jardim",
                kind=RecordKind.EXPENSE,
            ),
        ],
    )
