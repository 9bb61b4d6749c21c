"""Registration, login and profile updates against the users collection."""

import logging

from pydantic import Field, field_validator

from backend.auth.passwords import check_password, hash_password
from backend.core.errors import AuthenticationError, DuplicateIdentityError, EntityNotFoundError
from backend.models.document import Document, utc_now
from backend.models.institution import Address, Institution, WorkingHours, default_working_hours
from backend.models.user import User, UserRole
from backend.repositories.institutions import InstitutionRepository
from backend.repositories.users import UserRepository
from backend.storage.file_system import FileSystemStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class Registration(Document):
    name: str
    email: str
    password: str
    phone: str = ''
    cpf: str | None = None
    cnpj: str | None = None
    type: UserRole = UserRole.DONOR
    profile_image: str | None = None
    description: str = ''
    address: Address | None = None
    working_hours: list[WorkingHours] | None = None
    accepted_categories: list[str] = Field(default_factory=list)

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Name is required.')
        return normalized

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        if '@' not in normalized or normalized.startswith('@') or normalized.endswith('@'):
            raise ValueError('A valid email is required.')
        return normalized

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
        return value

    @field_validator('type')
    @classmethod
    def validate_type(cls, value: UserRole) -> UserRole:
        if value == UserRole.ADMIN:
            raise ValueError('Admin accounts cannot be self-registered.')
        return value

    @field_validator('cpf', 'cnpj')
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class ProfileUpdate(Document):
    name: str | None = None
    phone: str | None = None
    profile_image: str | None = None
    password: str | None = None

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str | None) -> str | None:
        if value is not None and len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
        return value


class AuthService:
    def __init__(self, store: FileSystemStore):
        self.users = UserRepository(store)
        self.institutions = InstitutionRepository(store)

    def register(self, data: Registration) -> User:
        identities = (self.users, self.institutions)

        if any(repository.find_by_email(data.email) for repository in identities):
            raise DuplicateIdentityError('email', 'Email already registered.')
        if data.cpf and self.users.find_by_cpf(data.cpf):
            raise DuplicateIdentityError('cpf', 'CPF already registered.')
        if data.cnpj and any(repository.find_by_cnpj(data.cnpj) for repository in identities):
            raise DuplicateIdentityError('cnpj', 'CNPJ already registered.')

        user = User(
            name=data.name,
            email=data.email,
            password=hash_password(data.password),
            phone=data.phone,
            cpf=data.cpf,
            cnpj=data.cnpj,
            type=data.type,
            profile_image=data.profile_image,
        )
        self.users.save(user)

        logger.info('Registered %s user %s', user.type.value, user.id)
        return user

    def institution_profile(self, user: User, data: Registration) -> Institution:
        """Institution document sharing the id of a newly registered institution user."""
        return Institution(
            **user.model_dump(),
            description=data.description,
            address=data.address or Address(),
            working_hours=data.working_hours or default_working_hours(),
            accepted_categories=data.accepted_categories,
        )

    def login(self, email: str, password: str) -> User:
        user = self.users.find_by_email(email)
        if user is None:
            logger.warning('Login attempt for unknown email')
            raise AuthenticationError('Email not found.')
        if not check_password(password, user.password):
            logger.warning('Wrong password for user %s', user.id)
            raise AuthenticationError('Wrong password.')
        return user

    def get_user(self, user_id: str) -> User | None:
        return self.users.get(user_id)

    def update_user(self, user_id: str, changes: ProfileUpdate) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise EntityNotFoundError('User', user_id)

        updates = changes.model_dump(exclude_unset=True, exclude_none=True, exclude={'password'})
        if changes.password:
            updates['password'] = hash_password(changes.password)
        updates['updated_at'] = utc_now()

        updated = user.model_copy(update=updates)
        self.users.save(updated)
        return updated
