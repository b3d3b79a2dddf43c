"""Generate a realistic demo portfolio."""

from __future__ import annotations

import logging
import random
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterator

from imob_control.dates import format_date
from imob_control.generators.base import BaseGenerator
from imob_control.models import (
    FinancialRecord,
    Property,
    PropertyStatus,
    PropertyType,
    RecordKind,
)

logger = logging.getLogger(__name__)

FEATURES = [
    "Piscina",
    "Varanda Gourmet",
    "Portaria 24h",
    "Academia",
    "Jardim",
    "Lareira",
    "Escritório",
    "Garagem",
    "Mobiliado",
    "Ar Condicionado",
    "Vista Mar",
    "Pet Friendly",
]

TITLE_PREFIX = {
    PropertyType.APARTMENT: "Apartamento",
    PropertyType.HOUSE: "Casa",
    PropertyType.COMMERCIAL: "Sala Comercial",
    PropertyType.LAND: "Terreno",
}

# Price ranges in thousands of BRL
PRICE_RANGES = {
    PropertyType.APARTMENT: (300, 3000),
    PropertyType.HOUSE: (500, 5000),
    PropertyType.COMMERCIAL: (400, 2500),
    PropertyType.LAND: (150, 1500),
}

EXPENSE_DESCRIPTIONS = [
    "Condomínio",
    "IPTU",
    "Conta de Luz",
    "Limpeza",
    "Manutenção",
    "Taxa da Plataforma",
]

STAY_DESCRIPTIONS = ["Diária Airbnb", "Hospedagem Booking", "Reserva Direta"]


class PropertyGenerator(BaseGenerator):
    """Generate properties without financial history."""

    def generate(self) -> Property:
        """Generate a property.

        Returns
        -------
        Property
            Generated property.
        """
        property_type = random.choice(list(PropertyType))
        low, high = PRICE_RANGES[property_type]
        neighborhood = self.fake.bairro()
        city = self.fake.city()

        if property_type == PropertyType.LAND:
            bedrooms, bathrooms = 0, 0
            area = float(random.randint(200, 2000))
        elif property_type == PropertyType.COMMERCIAL:
            bedrooms, bathrooms = 0, random.randint(1, 4)
            area = float(random.randint(40, 400))
        else:
            bedrooms = random.randint(1, 5)
            bathrooms = random.randint(1, bedrooms + 1)
            area = float(random.randint(30, 120) * bedrooms)

        return Property(
            id=self.fake.uuid4(),
            title=f"{TITLE_PREFIX[property_type]} {neighborhood}",
            description=self.fake.paragraph(nb_sentences=3),
            address=f"{self.fake.street_name()}, {self.fake.building_number()}, {city}, {self.fake.estado_sigla()}",
            consumer_unit=self.fake.numerify("########"),
            price=Decimal(random.randint(low, high) * 1000),
            type=property_type,
            status=random.choice(list(PropertyStatus)),
            bedrooms=bedrooms,
            bathrooms=bathrooms,
            area=area,
            image_url=f"https://picsum.photos/800/600?random={random.randint(1, 1000)}",
            features=random.sample(FEATURES, k=random.randint(1, 4)),
        )

    def generate_batch(self, count: int) -> Iterator[Property]:
        for _ in range(count):
            yield self.generate()


class FinancialRecordGenerator(BaseGenerator):
    """Generate short-stay revenue and recurring expenses for a property."""

    def generate_stay(self, check_in: date, nights: int, nightly_rate: Decimal) -> FinancialRecord:
        """One stay, paid on check-in."""
        check_out = check_in + timedelta(days=nights)
        return FinancialRecord(
            date=format_date(check_in),
            amount=nightly_rate * nights,
            description=random.choice(STAY_DESCRIPTIONS),
            kind=RecordKind.REVENUE,
            check_in=format_date(check_in),
            check_out=format_date(check_out),
        )

    def generate_expense(self, day: date) -> FinancialRecord:
        return FinancialRecord(
            date=format_date(day),
            amount=Decimal(random.randint(50, 900)),
            description=random.choice(EXPENSE_DESCRIPTIONS),
            kind=RecordKind.EXPENSE,
        )

    def generate_history(
        self,
        start: date,
        end: date,
        nightly_rate: Decimal,
        occupancy: float = 0.6,
    ) -> list[FinancialRecord]:
        """Non-overlapping stays plus one expense per month between two dates.

        Parameters
        ----------
        start, end : date
            Period covered by the history.
        nightly_rate : Decimal
            Price per night.
        occupancy : float
            Chance of a stay starting on any free day (0.0 to 1.0).
        """
        records: list[FinancialRecord] = []
        day = start
        while day < end:
            if random.random() < occupancy:
                nights = random.randint(1, 7)
                records.append(self.generate_stay(day, nights, nightly_rate))
                day += timedelta(days=nights)
            else:
                day += timedelta(days=1)

        month = start.replace(day=1)
        while month <= end:
            records.append(self.generate_expense(month + timedelta(days=random.randint(0, 27))))
            month = (month + timedelta(days=32)).replace(day=1)

        return records


class PortfolioGenerator:
    """Generate a complete demo portfolio.

    Parameters
    ----------
    num_properties : int
        Number of properties to generate.
    months : int
        Months of history per property, ending today.
    seed : int | None
        Random seed for reproducibility.
    """

    def __init__(self, num_properties: int = 4, months: int = 6, seed: int | None = None) -> None:
        self.num_properties = num_properties
        self.months = months
        self._property_gen = PropertyGenerator(seed=seed)
        self._record_gen = FinancialRecordGenerator(seed=seed)

    def generate(self, today: date | None = None) -> list[Property]:
        today = today or date.today()
        start = today - timedelta(days=30 * self.months)
        properties = []
        for prop in self._property_gen.generate_batch(self.num_properties):
            if prop.type in (PropertyType.APARTMENT, PropertyType.HOUSE):
                nightly_rate = (prop.price / 1000).quantize(Decimal("1"))
                prop.rental_history = self._record_gen.generate_history(start, today, nightly_rate)
            properties.append(prop)
        logger.info("Generated %d properties", len(properties))
        return properties
