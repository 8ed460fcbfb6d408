"""
Common Value Objects

Value objects used across multiple domains:
- DateRange: A tenancy period with an inclusive start and an optional inclusive end
"""

from dataclasses import dataclass
from datetime import date

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Both bounds are inclusive. A missing end_date means the range is
    open-ended (month-to-month tenancies run until someone gives notice).
    """
    start_date: date
    end_date: date | None = None

    def __post_init__(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError(
                f"End date ({self.end_date}) must not be before start date ({self.start_date})"
            )

    @property
    def is_open_ended(self) -> bool:
        return self.end_date is None

    def contains(self, check_date: date) -> bool:
        """
        Check if a date falls inside this range

        An open-ended range never "contains" a date here: containment is
        only defined against a known end.
        """
        if self.end_date is None:
            return False
        return self.start_date <= check_date <= self.end_date

    def encloses(self, other: 'DateRange') -> bool:
        """Check if this bounded range fully covers another bounded range"""
        if not isinstance(other, DateRange):
            raise TypeError("Can only check enclosure of another DateRange")
        if self.end_date is None or other.end_date is None:
            return False
        return self.start_date <= other.start_date and other.end_date <= self.end_date

    def __str__(self):
        end = self.end_date.isoformat() if self.end_date else "open"
        return f"{self.start_date.isoformat()}..{end}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
