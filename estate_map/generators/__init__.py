"""Sample data generators for listings and voters."""

from estate_map.generators.property import CityArea, PropertyGenerator
from estate_map.generators.user import UserGenerator

__all__ = ["CityArea", "PropertyGenerator", "UserGenerator"]
