"""User model definitions."""

from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator

from backend.models.document import Document, new_id, utc_now


class UserRole(str, Enum):
    DONOR = 'donor'
    INSTITUTION = 'institution'
    ADMIN = 'admin'


class User(Document):
    """Represents an application user."""

    id: str = Field(default_factory=new_id)
    name: str
    email: str
    password: str = ''  # bcrypt hash
    phone: str = ''
    cpf: str | None = None
    cnpj: str | None = None
    type: UserRole = UserRole.DONOR
    profile_image: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    def public_document(self) -> dict:
        document = self.to_document()
        document.pop('password', None)
        return document
