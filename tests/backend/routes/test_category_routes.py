import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from backend.models.user import User
from backend.routes.category_routes import (
    CategoryRequest,
    SubcategoryRequest,
    create_category,
    create_subcategory,
    delete_category,
    delete_subcategory,
    list_categories,
    update_category,
    update_subcategory,
)
from backend.services.app_state import AppState


def test_list_categories_after_refresh_returns_defaults(app_state: AppState) -> None:
    app_state.refresh()

    names = [category['name'] for category in list_categories(app_state=app_state)]

    assert names == ['Roupas', 'Alimentos', 'Móveis', 'Livros e Material Escolar', 'Brinquedos']


def test_category_request_requires_name_and_icon() -> None:
    with pytest.raises(ValidationError):
        CategoryRequest(name='  ', icon='📦')


def test_create_category(app_state: AppState, admin_user: User) -> None:
    category = create_category(
        data=CategoryRequest(name='Eletrônicos', icon='💻'),
        current_user=admin_user,
        app_state=app_state,
    )

    assert category['name'] == 'Eletrônicos'
    assert category['subcategories'] == []
    assert app_state.get_category(category['id']) is not None


def test_create_category_rejects_duplicate_name(app_state: AppState, admin_user: User) -> None:
    create_category(data=CategoryRequest(name='Roupas', icon='👕'), current_user=admin_user, app_state=app_state)

    with pytest.raises(HTTPException) as exception_info:
        create_category(data=CategoryRequest(name='roupas', icon='👚'), current_user=admin_user, app_state=app_state)

    assert exception_info.value.status_code == 409


def test_update_category_keeps_subcategories(app_state: AppState, admin_user: User) -> None:
    category = create_category(
        data=CategoryRequest(name='Roupas', icon='👕'),
        current_user=admin_user,
        app_state=app_state,
    )
    create_subcategory(
        category_id=category['id'],
        data=SubcategoryRequest(name='Calçados'),
        current_user=admin_user,
        app_state=app_state,
    )

    updated = update_category(
        category_id=category['id'],
        data=CategoryRequest(name='Vestuário', icon='👚'),
        current_user=admin_user,
        app_state=app_state,
    )

    assert updated['name'] == 'Vestuário'
    assert [item['name'] for item in updated['subcategories']] == ['Calçados']
    assert updated['subcategories'][0]['categoryId'] == category['id']


def test_update_missing_category_returns_not_found(app_state: AppState, admin_user: User) -> None:
    with pytest.raises(HTTPException) as exception_info:
        update_category(
            category_id='missing',
            data=CategoryRequest(name='X', icon='x'),
            current_user=admin_user,
            app_state=app_state,
        )

    assert exception_info.value.status_code == 404


def test_delete_category(app_state: AppState, admin_user: User) -> None:
    category = create_category(data=CategoryRequest(name='Roupas', icon='👕'), current_user=admin_user, app_state=app_state)

    assert delete_category(category_id=category['id'], current_user=admin_user, app_state=app_state) is None
    assert app_state.get_category(category['id']) is None

    with pytest.raises(HTTPException) as exception_info:
        delete_category(category_id=category['id'], current_user=admin_user, app_state=app_state)
    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'Category not found.'


def test_subcategory_routes(app_state: AppState, admin_user: User) -> None:
    category = create_category(data=CategoryRequest(name='Móveis', icon='🪑'), current_user=admin_user, app_state=app_state)
    subcategory = create_subcategory(
        category_id=category['id'],
        data=SubcategoryRequest(name='Cadeiras'),
        current_user=admin_user,
        app_state=app_state,
    )

    renamed = update_subcategory(
        category_id=category['id'],
        subcategory_id=subcategory['id'],
        data=SubcategoryRequest(name='Mesas'),
        current_user=admin_user,
        app_state=app_state,
    )
    delete_subcategory(
        category_id=category['id'],
        subcategory_id=subcategory['id'],
        current_user=admin_user,
        app_state=app_state,
    )

    assert renamed['name'] == 'Mesas'
    assert app_state.get_category(category['id']).subcategories == []


def test_create_subcategory_for_missing_category_returns_not_found(app_state: AppState, admin_user: User) -> None:
    with pytest.raises(HTTPException) as exception_info:
        create_subcategory(
            category_id='missing',
            data=SubcategoryRequest(name='Cadeiras'),
            current_user=admin_user,
            app_state=app_state,
        )

    assert exception_info.value.status_code == 404
