"""Shared serialization utilities for sinks."""

from collections.abc import Iterable
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from estate_map.models import Property


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if hasattr(obj, "to_document"):
        return serialize_value(obj.to_document())
    elif is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return obj
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def to_feature(prop: Property) -> dict:
    """Convert a listing to the GeoJSON feature the map layer renders."""
    return {
        "type": "Feature",
        "id": prop.property_id,
        "properties": {
            "id": prop.property_id,
            "price": float(prop.price),
            "size": prop.size,
            "pricePerSquareMeter": float(prop.price_per_square_meter),
            "rooms": prop.rooms,
            "yearBuilt": prop.year_built,
            "type": prop.property_type.value.lower(),
            "status": prop.status.value,
            "updatedAt": prop.updated_at.isoformat() if prop.updated_at else None,
            "numberOfReviews": prop.review_count,
            "dataReliability": prop.reliability,
        },
        "geometry": prop.location.to_geojson(),
    }


def to_feature_collection(properties: Iterable[Property]) -> dict:
    """Wrap listings in a GeoJSON ``FeatureCollection``."""
    return {
        "type": "FeatureCollection",
        "features": [to_feature(prop) for prop in properties],
    }
