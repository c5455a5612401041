"""Sample project basics for demos and seeding."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from live_grouping.generators.base import BaseGenerator
from live_grouping.models import ProjectData


class SampleProjectGenerator(BaseGenerator):
    """Generate realistic wizard basics for a project."""

    PROJECT_SUFFIXES = ["Heights", "Residency", "Greens", "Enclave", "Towers", "Meadows", "Vista"]
    POSSESSION_YEARS = range(2026, 2031)

    def generate_basics(self) -> dict[str, Any]:
        """Generate the step-2 fields of the wizard.

        Returns
        -------
        dict[str, Any]
            Field name to value, suitable for ``ProjectData.update``.
        """
        regular_rate = Decimal(self.random.randrange(3500, 12000, 250))
        group_rate = (regular_rate * Decimal("0.9")).quantize(Decimal("1"))
        city = self.fake.city()

        return {
            "title": f"{self.fake.last_name()} {self.random.choice(self.PROJECT_SUFFIXES)}",
            "developer": self.fake.company(),
            "location": city,
            "map_address": f"{self.fake.street_address()}, {city}",
            "latitude": self.fake.latitude(),
            "longitude": self.fake.longitude(),
            "description": self.fake.paragraph(nb_sentences=3),
            "min_buyers": self.random.randint(5, 40),
            "area": Decimal(self.random.randrange(900, 2400, 50)),
            "possession": f"Dec {self.random.choice(self.POSSESSION_YEARS)}",
            "rera_number": f"RERA-{self.fake.bothify('??###-####').upper()}",
            "regular_price_per_sqft": regular_rate,
            "group_price_per_sqft": group_rate,
        }

    def generate(self) -> ProjectData:
        """Generate a ``ProjectData`` with the basics filled in."""
        project = ProjectData()
        project.update(**self.generate_basics())
        return project
