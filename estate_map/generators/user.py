"""Sign-in profile generator for simulated voters."""

from __future__ import annotations

from typing import Iterator

from estate_map.generators.base import BaseGenerator
from estate_map.models import GoogleProfile


class UserGenerator(BaseGenerator):
    """Generate Google sign-in profiles with unique emails."""

    def generate(self) -> GoogleProfile:
        first_name = self.fake.first_name()
        last_name = self.fake.last_name()
        return GoogleProfile(
            google_id=self.fake.numerify("1##################"),
            email=self.fake.unique.email(),
            first_name=first_name,
            last_name=last_name,
            picture=self.fake.image_url(),
        )

    def generate_batch(self, count: int) -> Iterator[GoogleProfile]:
        for _ in range(count):
            yield self.generate()
