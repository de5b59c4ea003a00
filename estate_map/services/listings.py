"""Listing queries and listing submission."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from estate_map.config import EstateMapConfig
from estate_map.exceptions import PropertyNotFoundError, ValidationError
from estate_map.models import (
    GeoPoint,
    ListingFilter,
    ListingStatus,
    Property,
    PropertyType,
)
from estate_map.services.events import EventPublisher, EventSink
from estate_map.services.validation import validate_property
from estate_map.store import PROPERTIES, DocumentStore

logger = logging.getLogger(__name__)


@dataclass
class ListingQueryResult:
    """Matching listings plus the price span the sidebar sliders calibrate to."""

    min_price: Decimal | None = None
    max_price: Decimal | None = None
    data: list[Property] = field(default_factory=list)


class PropertyReadModel:
    """Read-only view over stored listings."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def query(self, filters: ListingFilter | None = None) -> ListingQueryResult:
        """Return every listing matching ``filters`` (no pagination)."""
        filters = filters or ListingFilter()
        matches = [
            prop
            for prop in (Property.from_document(doc) for doc in self.store.find(PROPERTIES))
            if _matches(prop, filters)
        ]
        matches.sort(key=lambda p: (p.created_at or datetime.min, p.property_id))

        if not matches:
            return ListingQueryResult()

        prices = [p.price for p in matches]
        return ListingQueryResult(min_price=min(prices), max_price=max(prices), data=matches)

    def get(self, property_id: str) -> Property:
        doc = self.store.get(PROPERTIES, property_id)
        if doc is None:
            raise PropertyNotFoundError(f"Property {property_id} not found")
        return Property.from_document(doc)


def _matches(prop: Property, filters: ListingFilter) -> bool:
    if filters.status is not None and prop.status != filters.status:
        return False
    if filters.property_types and prop.property_type not in filters.property_types:
        return False
    if filters.min_price is not None and prop.price < filters.min_price:
        return False
    if filters.max_price is not None and prop.price > filters.max_price:
        return False
    return filters.matches_rooms(prop.rooms)


class ListingService:
    """Accepts new listings from the map's "add property" form."""

    def __init__(
        self,
        store: DocumentStore,
        config: EstateMapConfig | None = None,
        events: EventSink | None = None,
    ) -> None:
        self.store = store
        self.config = config or EstateMapConfig()
        self._events = EventPublisher(events, f"{self.config.output.topic_prefix}.property-events")

    def create_property(self, payload: dict[str, Any]) -> Property:
        """Validate and store a submitted listing.

        Raises
        ------
        ValidationError
            With every problem found in ``payload``.
        """
        errors = validate_property(payload)
        if errors:
            raise ValidationError("Property validation failed", errors)

        longitude, latitude = payload["geometry"]["coordinates"]
        now = datetime.now()
        prop = Property(
            property_id=uuid.uuid4().hex,
            price=Decimal(str(payload["price"])),
            size=float(payload["size"]),
            rooms=int(payload["rooms"]),
            year_built=int(payload["yearBuilt"]),
            status=ListingStatus(payload["status"]),
            property_type=PropertyType(payload["type"]),
            location=GeoPoint(longitude=float(longitude), latitude=float(latitude)),
            reliability=self.config.reliability.initial,
            review_count=0,
            created_at=now,
            updated_at=now,
        )
        self.add(prop)
        return prop

    def add(self, prop: Property) -> None:
        """Store an already built listing (bulk seeding)."""
        if prop.created_at is None:
            prop.created_at = datetime.now()
        if prop.review_count != len(prop.votes):
            raise ValidationError(
                f"Property {prop.property_id} has {len(prop.votes)} votes "
                f"but review count {prop.review_count}"
            )
        self.store.insert(PROPERTIES, prop.property_id, prop.to_document())
        logger.debug("Stored property %s (%s, %s)", prop.property_id, prop.property_type.value, prop.price)
        self._events.publish(
            "property.created",
            prop.property_id,
            {
                "price": str(prop.price),
                "type": prop.property_type.value,
                "status": prop.status.value,
                "rooms": prop.rooms,
            },
        )
