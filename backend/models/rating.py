"""Rating model definitions."""

from datetime import datetime

from pydantic import Field

from backend.models.document import Document, new_id, utc_now


class Rating(Document):
    """A donor's review of an institution."""

    id: str = Field(default_factory=new_id)
    donor_id: str
    institution_id: str
    donation_id: str | None = None
    rating: float = Field(ge=1, le=5)
    comment: str = ''
    created_at: datetime = Field(default_factory=utc_now)
