"""Domain errors raised by the storage, repository and service layers.

Routes translate these into ``HTTPException`` responses.
"""


class BenignaError(Exception):
    """Base class for every error the application raises on purpose."""


class StorageError(BenignaError):
    """The key-value store could not complete a write."""


class StorageQuotaExceededError(StorageError):
    """A write would push the stored documents past ``STORAGE_QUOTA_BYTES``."""


class DuplicateIdentityError(BenignaError):
    """Email, CPF or CNPJ already registered."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class AuthenticationError(BenignaError):
    """Unknown email or wrong password."""


class EntityNotFoundError(BenignaError):
    def __init__(self, entity: str, entity_id: str):
        super().__init__(f'{entity} not found.')
        self.entity = entity
        self.entity_id = entity_id


class InvalidStatusTransitionError(BenignaError):
    def __init__(self, current: str, requested: str):
        super().__init__(f'Donation status cannot change from {current} to {requested}.')
        self.current = current
        self.requested = requested


class SchedulingError(BenignaError):
    """A donation cannot be scheduled at the requested time."""


class ImportPayloadError(BenignaError):
    """The backup payload is not valid JSON or does not match the export format."""
