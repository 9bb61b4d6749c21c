from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.auth import jwt_handler
from backend.core.errors import AuthenticationError
from backend.dependencies import get_store
from backend.models.user import User, UserRole
from backend.repositories.users import UserRepository
from backend.storage.file_system import FileSystemStore

security = HTTPBearer()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    store: FileSystemStore = Depends(get_store),
) -> User:
    try:
        payload = jwt_handler.decode_access_token(credentials.credentials)
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    user = UserRepository(store).get(payload["sub"])
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def ensure_role(user: User, *roles: UserRole, detail: str = "Not allowed for this account type.") -> None:
    if user.type not in roles:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    ensure_role(current_user, UserRole.ADMIN, detail="Only admins can perform this action.")
    return current_user


def require_donor(current_user: User = Depends(get_current_user)) -> User:
    ensure_role(current_user, UserRole.DONOR, detail="Only donors can perform this action.")
    return current_user
