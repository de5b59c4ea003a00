"""Pytest configuration and fixtures."""

from datetime import datetime
from decimal import Decimal

import pytest

from estate_map.models import GeoPoint, ListingStatus, Property, PropertyType
from estate_map.services import ListingService
from estate_map.store import DocumentStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def store() -> DocumentStore:
    """Fresh document store for each test."""
    return DocumentStore()


@pytest.fixture
def sample_voter_id() -> str:
    """Sample voter ID."""
    return "user-test-001"


@pytest.fixture
def sample_property() -> Property:
    """Fresh listing at full reliability."""
    return make_property("prop-001")


@pytest.fixture
def stored_property(store: DocumentStore, sample_property: Property) -> Property:
    """Sample listing already saved in the store."""
    ListingService(store).add(sample_property)
    return sample_property


@pytest.fixture
def valid_payload() -> dict:
    """Listing as posted by the "add property" form."""
    return {
        "geometry": {"type": "Point", "coordinates": [20.4573, 44.8125]},
        "price": 185000,
        "type": "Apartment",
        "size": 74,
        "rooms": 3,
        "yearBuilt": 2008,
        "status": "Buy",
    }


def make_property(
    property_id: str,
    price: str = "150000",
    size: float = 60.0,
    rooms: int = 2,
    status: ListingStatus = ListingStatus.BUY,
    property_type: PropertyType = PropertyType.APARTMENT,
    reliability: float = 100.0,
) -> Property:
    """Build a listing with sensible defaults."""
    return Property(
        property_id=property_id,
        price=Decimal(price),
        size=size,
        rooms=rooms,
        year_built=2001,
        status=status,
        property_type=property_type,
        location=GeoPoint(longitude=20.46, latitude=44.81),
        reliability=reliability,
        review_count=0,
        created_at=datetime(2024, 5, 1, 12, 0),
    )


@pytest.fixture
def property_factory():
    """Factory for listings with overridable fields."""
    return make_property
