"""Tests for listing queries, validation and submission."""

import json
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from estate_map.exceptions import PropertyNotFoundError, ValidationError
from estate_map.models import (
    ListingFilter,
    ListingStatus,
    PropertyType,
    RoomBucket,
)
from estate_map.services import ListingService, PropertyReadModel, validate_property
from estate_map.store import PROPERTIES, DocumentStore


@pytest.fixture
def seeded_store(store: DocumentStore, property_factory) -> DocumentStore:
    """Store with a small mix of listings."""
    service = ListingService(store)
    service.add(property_factory("apt-buy-1", price="90000", rooms=1))
    service.add(property_factory("apt-buy-2", price="150000", rooms=2))
    service.add(property_factory("apt-buy-3", price="210000", rooms=3))
    service.add(
        property_factory("house-buy-5", price="420000", rooms=5, property_type=PropertyType.HOUSE)
    )
    service.add(property_factory("apt-rent-2", price="650", rooms=2, status=ListingStatus.RENT))
    service.add(
        property_factory(
            "house-rent-4", price="1400", rooms=4, status=ListingStatus.RENT, property_type=PropertyType.HOUSE
        )
    )
    return store


def _ids(result) -> set[str]:
    return {p.property_id for p in result.data}


class TestPropertyReadModel:
    """Tests for filtered listing queries."""

    def test_no_filter_returns_everything(self, seeded_store: DocumentStore) -> None:
        result = PropertyReadModel(seeded_store).query()

        assert len(result.data) == 6
        assert result.min_price == Decimal("650")
        assert result.max_price == Decimal("420000")

    def test_status_filter(self, seeded_store: DocumentStore) -> None:
        result = PropertyReadModel(seeded_store).query(ListingFilter(status=ListingStatus.RENT))

        assert _ids(result) == {"apt-rent-2", "house-rent-4"}
        assert result.min_price == Decimal("650")
        assert result.max_price == Decimal("1400")

    def test_type_filter(self, seeded_store: DocumentStore) -> None:
        filters = ListingFilter(property_types=frozenset({PropertyType.HOUSE}))

        assert _ids(PropertyReadModel(seeded_store).query(filters)) == {"house-buy-5", "house-rent-4"}

    def test_price_bounds_are_inclusive(self, seeded_store: DocumentStore) -> None:
        filters = ListingFilter(min_price=Decimal("90000"), max_price=Decimal("210000"))

        result = PropertyReadModel(seeded_store).query(filters)

        assert _ids(result) == {"apt-buy-1", "apt-buy-2", "apt-buy-3"}
        assert result.min_price == Decimal("90000")
        assert result.max_price == Decimal("210000")

    def test_exact_rooms(self, seeded_store: DocumentStore) -> None:
        filters = ListingFilter(rooms=frozenset({RoomBucket.exact(2)}))

        assert _ids(PropertyReadModel(seeded_store).query(filters)) == {"apt-buy-2", "apt-rent-2"}

    def test_three_plus_rooms_with_exact(self, seeded_store: DocumentStore) -> None:
        filters = ListingFilter(rooms=frozenset({RoomBucket.exact(1), RoomBucket.at_least(3)}))

        assert _ids(PropertyReadModel(seeded_store).query(filters)) == {
            "apt-buy-1",
            "apt-buy-3",
            "house-buy-5",
            "house-rent-4",
        }

    def test_any_rooms_wins(self, seeded_store: DocumentStore) -> None:
        filters = ListingFilter(rooms=frozenset({RoomBucket.any(), RoomBucket.exact(1)}))

        assert len(PropertyReadModel(seeded_store).query(filters).data) == 6

    def test_combined_filters(self, seeded_store: DocumentStore) -> None:
        filters = ListingFilter.from_query(
            {
                "status": "Buy",
                "propertyTypes": ["Apartment"],
                "minPrice": "100000",
                "rooms": "2,3+",
            }
        )

        result = PropertyReadModel(seeded_store).query(filters)

        assert _ids(result) == {"apt-buy-2", "apt-buy-3"}
        assert result.min_price == Decimal("150000")
        assert result.max_price == Decimal("210000")

    def test_no_matches(self, seeded_store: DocumentStore) -> None:
        result = PropertyReadModel(seeded_store).query(ListingFilter(min_price=Decimal("1000000")))

        assert result.data == []
        assert result.min_price is None
        assert result.max_price is None

    def test_get(self, seeded_store: DocumentStore) -> None:
        read_model = PropertyReadModel(seeded_store)

        assert read_model.get("apt-buy-2").rooms == 2
        with pytest.raises(PropertyNotFoundError):
            read_model.get("missing")

    def test_query_does_not_write(self, seeded_store: DocumentStore) -> None:
        before = seeded_store.version_of(PROPERTIES, "apt-buy-1")

        PropertyReadModel(seeded_store).query()

        assert seeded_store.version_of(PROPERTIES, "apt-buy-1") == before


class TestValidateProperty:
    """Tests for listing validation."""

    def test_valid_payload(self, valid_payload: dict) -> None:
        assert validate_property(valid_payload) == []

    def test_collects_every_error(self) -> None:
        errors = validate_property({"price": -1, "type": "Castle", "rooms": 0, "status": "Lease"})

        assert "Geometry is required" in errors
        assert "Price must be a positive number" in errors
        assert 'Property type must be either "Apartment" or "House"' in errors
        assert "Size must be a positive number" in errors
        assert "Number of rooms must be a whole number of at least 1" in errors
        assert "Year built must be between 1800 and current year" in errors
        assert 'Status must be either "Buy" or "Rent"' in errors
        assert len(errors) == 7

    def test_geometry_type(self, valid_payload: dict) -> None:
        valid_payload["geometry"]["type"] = "Polygon"

        assert validate_property(valid_payload) == ['Geometry type must be "Point"']

    @pytest.mark.parametrize("coordinates", [[20.4], [20.4, "44.8"], "20.4,44.8", [20.4, 44.8, 0]])
    def test_malformed_coordinates(self, valid_payload: dict, coordinates) -> None:
        valid_payload["geometry"]["coordinates"] = coordinates

        assert validate_property(valid_payload) == ["Geometry coordinates must be an array of 2 numbers"]

    def test_coordinate_ranges(self, valid_payload: dict) -> None:
        valid_payload["geometry"]["coordinates"] = [-181, 91]

        assert validate_property(valid_payload) == [
            "Longitude must be between -180 and 180",
            "Latitude must be between -90 and 90",
        ]

    def test_fractional_rooms(self, valid_payload: dict) -> None:
        valid_payload["rooms"] = 2.5

        assert validate_property(valid_payload) == ["Number of rooms must be a whole number of at least 1"]

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_price_and_size(self, valid_payload: dict, value: float) -> None:
        valid_payload["price"] = value
        valid_payload["size"] = value

        assert validate_property(valid_payload) == [
            "Price must be a positive number",
            "Size must be a positive number",
        ]

    def test_non_finite_rooms_and_year(self, valid_payload: dict) -> None:
        valid_payload["rooms"] = float("inf")
        valid_payload["yearBuilt"] = float("nan")

        assert validate_property(valid_payload) == [
            "Number of rooms must be a whole number of at least 1",
            "Year built must be between 1800 and current year",
        ]

    def test_nan_from_json_body_is_rejected(self, store: DocumentStore, valid_payload: dict) -> None:
        payload = json.loads(json.dumps(valid_payload).replace("185000", "NaN"))

        with pytest.raises(ValidationError) as exc_info:
            ListingService(store).create_property(payload)

        assert exc_info.value.errors == ["Price must be a positive number"]
        assert PropertyReadModel(store).query().data == []

    def test_boolean_is_not_a_number(self, valid_payload: dict) -> None:
        valid_payload["price"] = True

        assert validate_property(valid_payload) == ["Price must be a positive number"]

    def test_year_built_bounds(self, valid_payload: dict) -> None:
        today = date(2024, 6, 1)

        valid_payload["yearBuilt"] = 1800
        assert validate_property(valid_payload, today=today) == []
        valid_payload["yearBuilt"] = 2024
        assert validate_property(valid_payload, today=today) == []
        valid_payload["yearBuilt"] = 2025
        assert validate_property(valid_payload, today=today) != []
        valid_payload["yearBuilt"] = 1799
        assert validate_property(valid_payload, today=today) != []


class TestListingService:
    """Tests for listing submission."""

    def test_create_property(self, store: DocumentStore, valid_payload: dict) -> None:
        prop = ListingService(store).create_property(valid_payload)

        assert prop.reliability == 100.0
        assert prop.review_count == 0
        assert prop.votes == []
        assert prop.price == Decimal("185000")
        assert prop.price_per_square_meter == Decimal("2500")
        assert prop.location.longitude == 20.4573
        assert PropertyReadModel(store).get(prop.property_id) == prop

    def test_create_rejects_invalid(self, store: DocumentStore, valid_payload: dict) -> None:
        valid_payload["size"] = 0

        with pytest.raises(ValidationError) as exc_info:
            ListingService(store).create_property(valid_payload)

        assert exc_info.value.errors == ["Size must be a positive number"]
        assert store.count(PROPERTIES) == 0

    def test_add_rejects_inconsistent_review_count(self, store: DocumentStore, property_factory) -> None:
        prop = property_factory("prop-bad")
        prop.review_count = 3

        with pytest.raises(ValidationError):
            ListingService(store).add(prop)

    def test_publishes_created_event(self, store: DocumentStore, valid_payload: dict) -> None:
        sink = MagicMock()

        prop = ListingService(store, events=sink).create_property(valid_payload)

        topic, event = sink.publish.call_args.args
        assert topic == "estate.property-events"
        assert event.event_type == "property.created"
        assert event.subject == prop.property_id
        assert event.data["price"] == "185000"

    def test_sink_failure_keeps_created_listing(self, store: DocumentStore, valid_payload: dict) -> None:
        sink = MagicMock()
        sink.publish.side_effect = RuntimeError("broker down")

        prop = ListingService(store, events=sink).create_property(valid_payload)

        assert PropertyReadModel(store).get(prop.property_id) == prop
