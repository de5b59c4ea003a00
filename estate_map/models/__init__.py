"""Domain models for the listing map."""

from estate_map.models.base import Event, GeoPoint
from estate_map.models.enums import (
    ListingStatus,
    PropertyType,
    RoomBucketKind,
    UserStatus,
    VoteType,
)
from estate_map.models.filters import ListingFilter, RoomBucket
from estate_map.models.property import Property, Vote
from estate_map.models.user import GoogleProfile, User

__all__ = [
    "Event",
    "GeoPoint",
    "GoogleProfile",
    "ListingFilter",
    "ListingStatus",
    "Property",
    "PropertyType",
    "RoomBucket",
    "RoomBucketKind",
    "User",
    "UserStatus",
    "Vote",
    "VoteType",
]
