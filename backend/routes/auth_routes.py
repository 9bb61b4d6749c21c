import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator

from backend.auth import jwt_handler
from backend.auth.dependencies import get_current_user
from backend.auth.service import AuthService, ProfileUpdate, Registration
from backend.core.errors import BenignaError
from backend.dependencies import get_app_state, get_store
from backend.models.user import User, UserRole
from backend.routes.errors import to_http_exception
from backend.services.app_state import AppState
from backend.storage.file_system import FileSystemStore

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not normalized:
            raise ValueError('Email is required.')
        return normalized


def session_payload(user: User) -> dict:
    token = jwt_handler.create_access_token(user_id=user.id, role=user.type.value)
    return {'access_token': token, 'token_type': 'bearer', 'user': user.public_document()}


@router.post('/register', status_code=status.HTTP_201_CREATED)
def register(
    data: Registration,
    store: FileSystemStore = Depends(get_store),
    app_state: AppState = Depends(get_app_state),
):
    service = AuthService(store)
    try:
        user = service.register(data)
        if user.type == UserRole.INSTITUTION:
            app_state.add_institution(service.institution_profile(user, data))
    except BenignaError as exc:
        logger.error('Registration failed: %s', exc)
        raise to_http_exception(exc) from exc

    return session_payload(user)


@router.post('/login')
def login(data: LoginRequest, store: FileSystemStore = Depends(get_store)):
    try:
        user = AuthService(store).login(data.email, data.password)
    except BenignaError as exc:
        raise to_http_exception(exc) from exc

    return session_payload(user)


@router.get('/me')
def me(current_user: User = Depends(get_current_user)):
    return current_user.public_document()


@router.put('/me')
def update_me(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    store: FileSystemStore = Depends(get_store),
    app_state: AppState = Depends(get_app_state),
):
    try:
        user = AuthService(store).update_user(current_user.id, data)

        institution = app_state.get_institution(user.id)
        if user.type == UserRole.INSTITUTION and institution is not None:
            app_state.update_institution(institution.model_copy(update={
                'name': user.name,
                'phone': user.phone,
                'profile_image': user.profile_image,
            }))
    except BenignaError as exc:
        raise to_http_exception(exc) from exc

    return user.public_document()


@router.post('/logout', status_code=status.HTTP_204_NO_CONTENT)
def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards its copy.
    del current_user
