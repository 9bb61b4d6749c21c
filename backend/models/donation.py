"""Donation model definitions."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from backend.core.errors import InvalidStatusTransitionError
from backend.models.document import Document, new_id, utc_now


class DonationCondition(str, Enum):
    NEW = 'new'
    USED_GOOD = 'used_good'
    USED_FAIR = 'used_fair'


class DonationStatus(str, Enum):
    PENDING = 'pending'
    SCHEDULED = 'scheduled'
    DELIVERED = 'delivered'

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)


_STATUS_ORDER = [DonationStatus.PENDING, DonationStatus.SCHEDULED, DonationStatus.DELIVERED]


def ensure_forward_transition(current: DonationStatus, requested: DonationStatus) -> None:
    """Status may stay put or move forward; delivered is final."""
    if current == DonationStatus.DELIVERED and requested != DonationStatus.DELIVERED:
        raise InvalidStatusTransitionError(current.value, requested.value)
    if requested.rank < current.rank:
        raise InvalidStatusTransitionError(current.value, requested.value)


class Donation(Document):
    """A pledged item transfer from a donor to an institution."""

    id: str = Field(default_factory=new_id)
    donor_id: str
    institution_id: str
    category: str
    subcategory: str = ''
    description: str = ''
    quantity: int = Field(default=1, gt=0)
    condition: DonationCondition = DonationCondition.USED_GOOD
    status: DonationStatus = DonationStatus.PENDING
    images: list[str] = Field(default_factory=list)
    scheduled_date: datetime | None = None
    delivered_date: datetime | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
