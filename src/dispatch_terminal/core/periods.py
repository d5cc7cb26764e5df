"""Daily shifts partitioning the dispatch queues."""

from __future__ import annotations

from enum import Enum


class Period(str, Enum):
    """One of the two fixed daily shifts.

    The stored value is the label shown on the terminal; ``slug`` is the
    ASCII form used in URLs.
    """

    MORNING = "Manhã"
    AFTERNOON = "Tarde"

    @property
    def slug(self) -> str:
        return self.name.lower()

    @classmethod
    def from_slug(cls, slug: str) -> Period:
        """Resolve ``morning``/``afternoon`` (or the stored label) to a Period.

        Raises:
            ValueError: If the slug names no period.
        """
        for period in cls:
            if slug.lower() in (period.slug, period.value.lower()):
                return period
        raise ValueError(f"Unknown period: {slug}")
