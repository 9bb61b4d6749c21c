from fastapi import HTTPException, status

from backend.core.errors import (
    AuthenticationError,
    BenignaError,
    DuplicateIdentityError,
    EntityNotFoundError,
    ImportPayloadError,
    InvalidStatusTransitionError,
    SchedulingError,
    StorageError,
    StorageQuotaExceededError,
)

STORAGE_UNAVAILABLE = 'Storage unavailable. Verify DATABASE_URL.'

_STATUS_CODES = [
    (DuplicateIdentityError, status.HTTP_409_CONFLICT),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidStatusTransitionError, status.HTTP_409_CONFLICT),
    (SchedulingError, status.HTTP_400_BAD_REQUEST),
    (ImportPayloadError, status.HTTP_400_BAD_REQUEST),
    (StorageQuotaExceededError, status.HTTP_507_INSUFFICIENT_STORAGE),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def to_http_exception(exc: BenignaError) -> HTTPException:
    if isinstance(exc, StorageError) and not isinstance(exc, StorageQuotaExceededError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=STORAGE_UNAVAILABLE)
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
