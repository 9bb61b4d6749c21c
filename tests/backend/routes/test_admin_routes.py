import asyncio
import io
import json

import pytest
from fastapi import HTTPException, UploadFile

from backend.models.donation import Donation
from backend.models.institution import Institution
from backend.models.user import User
from backend.repositories.users import UserRepository
from backend.routes.admin_routes import export_backup, get_stats, import_backup
from backend.services.app_state import AppState
from backend.storage.file_system import FileSystemStore


def test_get_stats(store: FileSystemStore, app_state: AppState, admin_user: User, donor: User, institution: Institution) -> None:
    app_state.add_donation(Donation(donor_id=donor.id, institution_id=institution.id, category='Roupas'))

    stats = get_stats(current_user=admin_user, store=store, app_state=app_state)

    assert stats['total_users'] == 2
    assert stats['total_institutions'] == 1
    assert stats['total_donations'] == 1
    assert stats['delivered_donations'] == 0


def test_export_backup_is_downloadable_json(store: FileSystemStore, admin_user: User) -> None:
    response = export_backup(current_user=admin_user, store=store)

    assert response.media_type == 'application/json'
    assert 'attachment' in response.headers['content-disposition']
    assert [user['email'] for user in json.loads(response.body)['users']] == ['admin@benigna.com']


def test_import_backup_replaces_data_and_reloads_state(
    store: FileSystemStore,
    app_state: AppState,
    admin_user: User,
    donor: User,
    institution: Institution,
) -> None:
    backup = export_backup(current_user=admin_user, store=store).body
    app_state.add_donation(Donation(donor_id=donor.id, institution_id=institution.id, category='Roupas'))
    UserRepository(store).save(User(name='Novo', email='novo@example.com'))

    counts = asyncio.run(import_backup(
        file=UploadFile(file=io.BytesIO(backup), filename='backup.json'),
        current_user=admin_user,
        store=store,
        app_state=app_state,
    ))

    assert counts == {'users': 2, 'institutions': 1, 'donations': 0, 'categories': 0, 'ratings': 0}
    assert app_state.donations == []
    assert [item.id for item in app_state.institutions] == [institution.id]
    assert len(UserRepository(store).get_all()) == 2


def test_import_backup_rejects_malformed_payload(
    store: FileSystemStore,
    app_state: AppState,
    admin_user: User,
) -> None:
    with pytest.raises(HTTPException) as exception_info:
        asyncio.run(import_backup(
            file=UploadFile(file=io.BytesIO(b'{broken'), filename='backup.json'),
            current_user=admin_user,
            store=store,
            app_state=app_state,
        ))

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'Backup is not valid JSON.'
    assert [user.id for user in UserRepository(store).get_all()] == [admin_user.id]
