"""Institution model definitions."""

import re

from pydantic import Field, field_validator, model_validator

from backend.models.document import Document, new_id
from backend.models.user import User, UserRole

_TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


class Address(Document):
    id: str = Field(default_factory=new_id)
    street: str = ''
    number: str = ''
    neighborhood: str = ''
    city: str = ''
    state: str = ''
    zip_code: str = ''
    latitude: float = Field(default=0.0, ge=-90, le=90)
    longitude: float = Field(default=0.0, ge=-180, le=180)


class WorkingHours(Document):
    """Opening hours for one weekday, ``day_of_week`` 0 is Sunday."""

    day_of_week: int = Field(ge=0, le=6)
    is_open: bool = False
    open_time: str = ''
    close_time: str = ''

    @model_validator(mode='after')
    def validate_times(self) -> 'WorkingHours':
        if not self.is_open:
            return self
        if not _TIME_PATTERN.match(self.open_time) or not _TIME_PATTERN.match(self.close_time):
            raise ValueError('Open days need open and close times as HH:MM.')
        if self.open_time >= self.close_time:
            raise ValueError('Close time must be after open time.')
        return self


def default_working_hours() -> list[WorkingHours]:
    return [WorkingHours(day_of_week=day) for day in range(7)]


class Institution(User):
    """A charity or NGO; shares its id with the matching user record."""

    type: UserRole = UserRole.INSTITUTION
    description: str = ''
    address: Address = Field(default_factory=Address)
    working_hours: list[WorkingHours] = Field(default_factory=default_working_hours)
    accepted_categories: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    rating: float = 0.0
    total_ratings: int = 0
    verified: bool = False

    @field_validator('accepted_categories')
    @classmethod
    def dedupe_categories(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for name in value:
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
        return seen

    def hours_for(self, day_of_week: int) -> WorkingHours | None:
        for hours in self.working_hours:
            if hours.day_of_week == day_of_week:
                return hours
        return None
