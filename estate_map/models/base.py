"""Base models shared across entities."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class GeoPoint:
    """WGS84 point, serialized as a GeoJSON ``Point``.

    Coordinates follow GeoJSON order: longitude first.
    """

    longitude: float
    latitude: float

    def to_geojson(self) -> dict:
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}

    @classmethod
    def from_geojson(cls, geometry: dict) -> "GeoPoint":
        longitude, latitude = geometry["coordinates"]
        return cls(longitude=float(longitude), latitude=float(latitude))


@dataclass
class Event:
    """Standard event envelope for streaming."""

    event_id: str
    event_type: str  # entity.action (e.g., vote.added)
    event_time: datetime
    source: str  # Service/system that generated
    subject: str  # Entity ID affected
    data: dict
    metadata: dict = field(default_factory=dict)
