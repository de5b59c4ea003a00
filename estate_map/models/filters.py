"""Listing filter configuration used by the map sidebar."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from estate_map.exceptions import ValidationError
from estate_map.models.enums import ListingStatus, PropertyType, RoomBucketKind


@dataclass(frozen=True)
class RoomBucket:
    """One selectable room-count option.

    ``ANY`` disables room filtering, ``EXACT`` matches ``count`` rooms and
    ``AT_LEAST`` matches ``count`` rooms or more (the sidebar's "3+").
    """

    kind: RoomBucketKind
    count: int = 0

    @classmethod
    def any(cls) -> "RoomBucket":
        return cls(RoomBucketKind.ANY)

    @classmethod
    def exact(cls, count: int) -> "RoomBucket":
        return cls(RoomBucketKind.EXACT, count)

    @classmethod
    def at_least(cls, count: int) -> "RoomBucket":
        return cls(RoomBucketKind.AT_LEAST, count)

    @classmethod
    def parse(cls, raw: str | int) -> "RoomBucket":
        """Parse a sidebar value such as ``"Any"``, ``"2"`` or ``"3+"``."""
        if isinstance(raw, int) and not isinstance(raw, bool):
            if raw < 1:
                raise ValidationError(f"Invalid room option: {raw!r}")
            return cls.exact(raw)

        text = str(raw).strip()
        if text.lower() == "any":
            return cls.any()

        open_ended = text.endswith("+")
        digits = text[:-1] if open_ended else text
        if not digits.isdigit() or int(digits) < 1:
            raise ValidationError(f"Invalid room option: {raw!r}")

        count = int(digits)
        return cls.at_least(count) if open_ended else cls.exact(count)

    def matches(self, rooms: int) -> bool:
        if self.kind is RoomBucketKind.ANY:
            return True
        if self.kind is RoomBucketKind.AT_LEAST:
            return rooms >= self.count
        return rooms == self.count


@dataclass(frozen=True)
class ListingFilter:
    """Explicit filter over listings; ``None`` / empty means unfiltered."""

    status: ListingStatus | None = None
    property_types: frozenset[PropertyType] = field(default_factory=frozenset)
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    rooms: frozenset[RoomBucket] = field(default_factory=frozenset)

    def matches_rooms(self, rooms: int) -> bool:
        if not self.rooms:
            return True
        return any(bucket.matches(rooms) for bucket in self.rooms)

    @classmethod
    def from_query(cls, query: Mapping[str, Any]) -> "ListingFilter":
        """Build a filter from loosely typed query parameters.

        Parameters
        ----------
        query : Mapping[str, Any]
            Keys ``status``, ``propertyTypes``, ``minPrice``, ``maxPrice``
            and ``rooms``; list values may also be comma-separated strings.

        Returns
        -------
        ListingFilter
            Parsed filter.

        Raises
        ------
        ValidationError
            If any value cannot be parsed.
        """
        errors: list[str] = []

        status = None
        if query.get("status"):
            try:
                status = ListingStatus(query["status"])
            except ValueError:
                errors.append(f"Unknown status: {query['status']!r}")

        property_types: set[PropertyType] = set()
        for raw in _as_list(query.get("propertyTypes")):
            try:
                property_types.add(PropertyType(raw))
            except ValueError:
                errors.append(f"Unknown property type: {raw!r}")

        min_price = _parse_price(query.get("minPrice"), "minPrice", errors)
        max_price = _parse_price(query.get("maxPrice"), "maxPrice", errors)
        if min_price is not None and max_price is not None and min_price > max_price:
            errors.append("minPrice cannot exceed maxPrice")

        rooms: set[RoomBucket] = set()
        for raw in _as_list(query.get("rooms")):
            try:
                rooms.add(RoomBucket.parse(raw))
            except ValidationError as exc:
                errors.extend(exc.errors)

        if errors:
            raise ValidationError("Invalid listing filter", errors)

        return cls(
            status=status,
            property_types=frozenset(property_types),
            min_price=min_price,
            max_price=max_price,
            rooms=frozenset(rooms),
        )


def _as_list(value: Any) -> list[Any]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, Iterable):
        return list(value)
    return [value]


def _parse_price(value: Any, name: str, errors: list[str]) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        errors.append(f"{name} must be a number")
        return None
    if not price.is_finite() or price < 0:
        errors.append(f"{name} must be a non-negative number")
        return None
    return price
