"""Listing generator for seeding the map."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterator

from estate_map.generators.base import BaseGenerator
from estate_map.models import GeoPoint, ListingStatus, Property, PropertyType


@dataclass(frozen=True)
class CityArea:
    """Bounding box listings are scattered across, with local price levels."""

    name: str
    min_longitude: float
    max_longitude: float
    min_latitude: float
    max_latitude: float
    sale_price_per_sqm: tuple[int, int]  # EUR
    rent_price_per_sqm: tuple[int, int]  # EUR / month

    @classmethod
    def belgrade(cls) -> CityArea:
        return cls("Belgrade", 20.35, 20.55, 44.75, 44.85, (1500, 4500), (8, 20))

    @classmethod
    def novi_sad(cls) -> CityArea:
        return cls("Novi Sad", 19.78, 19.90, 45.23, 45.28, (1200, 3000), (6, 14))


class PropertyGenerator(BaseGenerator):
    """Generate synthetic listings."""

    PROPERTY_TYPES = list(PropertyType)
    TYPE_WEIGHTS = [0.75, 0.25]

    STATUSES = list(ListingStatus)
    STATUS_WEIGHTS = [0.6, 0.4]

    # Size ranges in square meters
    SIZE_RANGES = {
        PropertyType.APARTMENT: (25, 140),
        PropertyType.HOUSE: (70, 350),
    }

    def __init__(
        self,
        seed: int | None = None,
        area: CityArea | None = None,
        initial_reliability: float = 100.0,
    ) -> None:
        super().__init__(seed)
        self.area = area or CityArea.belgrade()
        self.initial_reliability = initial_reliability

    def generate(self) -> Property:
        """Generate a single listing.

        Returns
        -------
        Property
            Generated listing with no votes.
        """
        return self._generate_one()

    def generate_batch(self, count: int) -> Iterator[Property]:
        """Generate multiple listings.

        Parameters
        ----------
        count : int
            Number of listings to generate.

        Yields
        ------
        Property
            Generated listings.
        """
        for _ in range(count):
            yield self._generate_one()

    def _generate_one(self) -> Property:
        property_type = random.choices(self.PROPERTY_TYPES, weights=self.TYPE_WEIGHTS, k=1)[0]
        status = random.choices(self.STATUSES, weights=self.STATUS_WEIGHTS, k=1)[0]

        low, high = self.SIZE_RANGES[property_type]
        size = round(random.uniform(low, high), 1)
        # Roughly one room per 25 m2
        rooms = max(1, min(8, int(size // 25) + random.randint(-1, 1)))

        per_sqm_range = (
            self.area.sale_price_per_sqm if status == ListingStatus.BUY else self.area.rent_price_per_sqm
        )
        price = Decimal(round(size * random.uniform(*per_sqm_range)))

        created_at = datetime.now() - timedelta(days=random.randint(0, 365))

        return Property(
            property_id=self.fake.uuid4(),
            price=price,
            size=size,
            rooms=rooms,
            year_built=random.randint(1930, datetime.now().year),
            status=status,
            property_type=property_type,
            location=GeoPoint(
                longitude=round(random.uniform(self.area.min_longitude, self.area.max_longitude), 6),
                latitude=round(random.uniform(self.area.min_latitude, self.area.max_latitude), 6),
            ),
            reliability=self.initial_reliability,
            review_count=0,
            created_at=created_at,
            updated_at=created_at,
        )
