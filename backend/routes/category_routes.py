from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator

from backend.auth.dependencies import require_admin
from backend.core.errors import BenignaError
from backend.dependencies import get_app_state
from backend.models.category import Category, Subcategory
from backend.models.user import User
from backend.routes.errors import to_http_exception
from backend.services.app_state import AppState

router = APIRouter(tags=['categories'])


def _required(value: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError('Field is required.')
    return normalized


class CategoryRequest(BaseModel):
    name: str
    icon: str

    @field_validator('name', 'icon')
    @classmethod
    def validate_required(cls, value: str) -> str:
        return _required(value)


class SubcategoryRequest(BaseModel):
    name: str

    @field_validator('name')
    @classmethod
    def validate_required(cls, value: str) -> str:
        return _required(value)


def get_category_or_404(app_state: AppState, category_id: str) -> Category:
    category = app_state.get_category(category_id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Category not found.')
    return category


def ensure_unique_name(app_state: AppState, name: str, category_id: str | None = None) -> None:
    for category in app_state.categories:
        if category.id != category_id and category.name.lower() == name.lower():
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail='A category with this name already exists.')


@router.get('/')
def list_categories(app_state: AppState = Depends(get_app_state)):
    return [category.to_document() for category in app_state.categories]


@router.post('/', status_code=status.HTTP_201_CREATED)
def create_category(
    data: CategoryRequest,
    current_user: User = Depends(require_admin),
    app_state: AppState = Depends(get_app_state),
):
    del current_user
    ensure_unique_name(app_state, data.name)
    try:
        category = app_state.add_category(Category(name=data.name, icon=data.icon))
    except BenignaError as exc:
        raise to_http_exception(exc) from exc
    return category.to_document()


@router.put('/{category_id}')
def update_category(
    category_id: str,
    data: CategoryRequest,
    current_user: User = Depends(require_admin),
    app_state: AppState = Depends(get_app_state),
):
    del current_user
    category = get_category_or_404(app_state, category_id)
    ensure_unique_name(app_state, data.name, category_id)
    try:
        category = app_state.update_category(category.model_copy(update={'name': data.name, 'icon': data.icon}))
    except BenignaError as exc:
        raise to_http_exception(exc) from exc
    return category.to_document()


@router.delete('/{category_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    current_user: User = Depends(require_admin),
    app_state: AppState = Depends(get_app_state),
):
    del current_user
    try:
        app_state.delete_category(category_id)
    except BenignaError as exc:
        raise to_http_exception(exc) from exc


@router.post('/{category_id}/subcategories', status_code=status.HTTP_201_CREATED)
def create_subcategory(
    category_id: str,
    data: SubcategoryRequest,
    current_user: User = Depends(require_admin),
    app_state: AppState = Depends(get_app_state),
):
    del current_user
    try:
        subcategory: Subcategory = app_state.add_subcategory(category_id, data.name)
    except BenignaError as exc:
        raise to_http_exception(exc) from exc
    return subcategory.to_document()


@router.put('/{category_id}/subcategories/{subcategory_id}')
def update_subcategory(
    category_id: str,
    subcategory_id: str,
    data: SubcategoryRequest,
    current_user: User = Depends(require_admin),
    app_state: AppState = Depends(get_app_state),
):
    del current_user
    try:
        subcategory = app_state.update_subcategory(category_id, subcategory_id, data.name)
    except BenignaError as exc:
        raise to_http_exception(exc) from exc
    return subcategory.to_document()


@router.delete('/{category_id}/subcategories/{subcategory_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_subcategory(
    category_id: str,
    subcategory_id: str,
    current_user: User = Depends(require_admin),
    app_state: AppState = Depends(get_app_state),
):
    del current_user
    try:
        app_state.delete_subcategory(category_id, subcategory_id)
    except BenignaError as exc:
        raise to_http_exception(exc) from exc
