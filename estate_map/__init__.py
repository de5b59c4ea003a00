"""estate-map: listings, crowd price votes and reliability scoring."""

__version__ = "0.1.0"
