"""Enumeration types for listing entities."""

from enum import Enum


class ListingStatus(str, Enum):
    BUY = "Buy"
    RENT = "Rent"


class PropertyType(str, Enum):
    APARTMENT = "Apartment"
    HOUSE = "House"


class VoteType(str, Enum):
    """Crowd opinion about a listing's stated price.

    ``LOWER`` and ``HIGHER`` dispute the price, ``EQUAL`` confirms it.
    """

    LOWER = "lower"
    EQUAL = "equal"
    HIGHER = "higher"


class UserStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    BANNED = "banned"


class RoomBucketKind(str, Enum):
    ANY = "ANY"
    EXACT = "EXACT"
    AT_LEAST = "AT_LEAST"
