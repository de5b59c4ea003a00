"""Validation of submitted listings."""

import math
from datetime import date
from typing import Any

from estate_map.models import ListingStatus, PropertyType

MIN_YEAR_BUILT = 1800


def _is_number(value: Any) -> bool:
    # JSON bodies may carry NaN or Infinity, which compare False against any bound
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def validate_property(payload: dict[str, Any], today: date | None = None) -> list[str]:
    """Collect every problem with a submitted listing.

    Parameters
    ----------
    payload : dict[str, Any]
        Listing as posted by the map client: ``geometry`` (GeoJSON point),
        ``price``, ``type``, ``size``, ``rooms``, ``yearBuilt``, ``status``.
    today : date | None
        Reference date for the year-built upper bound (default: today).

    Returns
    -------
    list[str]
        Human readable errors; empty when the listing is valid.
    """
    errors: list[str] = []
    current_year = (today or date.today()).year

    geometry = payload.get("geometry")
    if not isinstance(geometry, dict):
        errors.append("Geometry is required")
    else:
        if geometry.get("type", "Point") != "Point":
            errors.append('Geometry type must be "Point"')
        coordinates = geometry.get("coordinates")
        if (
            not isinstance(coordinates, (list, tuple))
            or len(coordinates) != 2
            or not all(_is_number(c) for c in coordinates)
        ):
            errors.append("Geometry coordinates must be an array of 2 numbers")
        else:
            longitude, latitude = coordinates
            if not -180 <= longitude <= 180:
                errors.append("Longitude must be between -180 and 180")
            if not -90 <= latitude <= 90:
                errors.append("Latitude must be between -90 and 90")

    price = payload.get("price")
    if not _is_number(price) or price <= 0:
        errors.append("Price must be a positive number")

    if payload.get("type") not in {t.value for t in PropertyType}:
        errors.append('Property type must be either "Apartment" or "House"')

    size = payload.get("size")
    if not _is_number(size) or size <= 0:
        errors.append("Size must be a positive number")

    rooms = payload.get("rooms")
    if not _is_number(rooms) or rooms < 1 or int(rooms) != rooms:
        errors.append("Number of rooms must be a whole number of at least 1")

    year_built = payload.get("yearBuilt")
    if not _is_number(year_built) or not MIN_YEAR_BUILT <= year_built <= current_year:
        errors.append(f"Year built must be between {MIN_YEAR_BUILT} and current year")

    if payload.get("status") not in {s.value for s in ListingStatus}:
        errors.append('Status must be either "Buy" or "Rent"')

    return errors
