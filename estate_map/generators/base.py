"""Base generator class for sample data generators."""

from __future__ import annotations

import random
from abc import ABC

from faker import Faker

# Closest regional locale Faker ships for the Belgrade/Novi Sad listings
DEFAULT_LOCALE = "hr_HR"


class BaseGenerator(ABC):
    """Base class for all sample data generators.

    Provides common initialization: Faker instance creation and
    seed-based reproducibility.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``DEFAULT_LOCALE``).
    """

    def __init__(self, seed: int | None = None, locale: str = DEFAULT_LOCALE) -> None:
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)
            random.seed(seed)
