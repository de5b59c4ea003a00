"""Property listing and embedded vote models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from estate_map.models.base import GeoPoint
from estate_map.models.enums import ListingStatus, PropertyType, VoteType


@dataclass(frozen=True)
class Vote:
    """A voter's opinion on one property; replaced, never edited."""

    voter_id: str
    vote_type: VoteType
    voted_at: datetime | None = None

    def to_document(self) -> dict[str, Any]:
        return {
            "voter_id": self.voter_id,
            "vote_type": self.vote_type.value,
            "voted_at": self.voted_at.isoformat() if self.voted_at else None,
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Vote":
        voted_at = doc.get("voted_at")
        return cls(
            voter_id=doc["voter_id"],
            vote_type=VoteType(doc["vote_type"]),
            voted_at=datetime.fromisoformat(voted_at) if voted_at else None,
        )


@dataclass
class Property:
    """Real estate listing shown on the map."""

    property_id: str
    price: Decimal
    size: float  # Square meters
    rooms: int
    year_built: int
    status: ListingStatus
    property_type: PropertyType
    location: GeoPoint
    reliability: float = 100.0
    review_count: int = 0
    votes: list[Vote] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def price_per_square_meter(self) -> Decimal:
        """Price divided by size, rounded to whole currency units."""
        ratio = self.price / Decimal(str(self.size))
        return ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP)

    def to_document(self) -> dict[str, Any]:
        """Convert to the document shape kept in the store."""
        return {
            "property_id": self.property_id,
            "geometry": self.location.to_geojson(),
            "price": str(self.price),
            "size": self.size,
            "rooms": self.rooms,
            "year_built": self.year_built,
            "status": self.status.value,
            "type": self.property_type.value,
            "price_per_square_meter": str(self.price_per_square_meter),
            "reliability": self.reliability,
            "review_count": self.review_count,
            "votes": [vote.to_document() for vote in self.votes],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Property":
        created_at = doc.get("created_at")
        updated_at = doc.get("updated_at")
        return cls(
            property_id=doc["property_id"],
            price=Decimal(doc["price"]),
            size=float(doc["size"]),
            rooms=int(doc["rooms"]),
            year_built=int(doc["year_built"]),
            status=ListingStatus(doc["status"]),
            property_type=PropertyType(doc["type"]),
            location=GeoPoint.from_geojson(doc["geometry"]),
            reliability=float(doc.get("reliability", 100.0)),
            review_count=int(doc.get("review_count", 0)),
            votes=[Vote.from_document(v) for v in doc.get("votes", [])],
            created_at=datetime.fromisoformat(created_at) if created_at else None,
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )
