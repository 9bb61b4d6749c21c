import logging

from fastapi import APIRouter, Depends, File, Response, UploadFile
from starlette.concurrency import run_in_threadpool

from backend.auth.dependencies import require_admin
from backend.core.errors import BenignaError
from backend.dependencies import get_app_state, get_store
from backend.models.user import User
from backend.repositories.users import UserRepository
from backend.routes.errors import to_http_exception
from backend.services import backup
from backend.services.app_state import AppState
from backend.services.stats import admin_stats
from backend.storage.file_system import FileSystemStore

router = APIRouter(tags=['admin'])

logger = logging.getLogger(__name__)


@router.get('/stats')
def get_stats(
    current_user: User = Depends(require_admin),
    store: FileSystemStore = Depends(get_store),
    app_state: AppState = Depends(get_app_state),
):
    del current_user
    return admin_stats(
        UserRepository(store).get_all(),
        app_state.institutions,
        app_state.donations,
        app_state.categories,
        app_state.ratings,
    )


@router.get('/export')
def export_backup(
    current_user: User = Depends(require_admin),
    store: FileSystemStore = Depends(get_store),
):
    del current_user
    return Response(
        content=backup.export_data(store),
        media_type='application/json',
        headers={'Content-Disposition': 'attachment; filename="benigna-backup.json"'},
    )


@router.post('/import')
async def import_backup(
    file: UploadFile = File(...),
    current_user: User = Depends(require_admin),
    store: FileSystemStore = Depends(get_store),
    app_state: AppState = Depends(get_app_state),
):
    payload = await file.read()
    try:
        bundle = await run_in_threadpool(backup.import_data, store, payload)
        await run_in_threadpool(app_state.refresh)
    except BenignaError as exc:
        logger.error('Import requested by %s failed: %s', current_user.id, exc)
        raise to_http_exception(exc) from exc

    return {
        'users': len(bundle.users),
        'institutions': len(bundle.institutions),
        'donations': len(bundle.donations),
        'categories': len(bundle.categories),
        'ratings': len(bundle.ratings),
    }
