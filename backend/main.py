import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.core.errors import StorageError
from backend.database import SessionLocal, ensure_storage_schema
from backend.repositories.sample_data import initialize_sample_data
from backend.routes import (
    admin_routes,
    auth_routes,
    category_routes,
    donation_routes,
    image_routes,
    institution_routes,
    rating_routes,
)
from backend.services.app_state import AppState
from backend.storage.file_system import FileSystemStore

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_storage() -> None:
    config.validate_runtime_config()
    try:
        ensure_storage_schema()
        with SessionLocal() as db:
            store = FileSystemStore(db)
            store.initialize_directories()
            if config.SEED_SAMPLE_DATA:
                initialize_sample_data(store)

        app_state = AppState(SessionLocal)
        app_state.refresh()
        app.state.data = app_state
    except (SQLAlchemyError, StorageError):
        logger.exception('Storage initialization failed. Check DATABASE_URL.')


@app.get('/')
def root():
    return {'status': 'Benigna API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(institution_routes.router, prefix='/institutions')
app.include_router(donation_routes.router, prefix='/donations')
app.include_router(rating_routes.router, prefix='/ratings')
app.include_router(category_routes.router, prefix='/categories')
app.include_router(image_routes.router, prefix='/images')
app.include_router(admin_routes.router, prefix='/admin')
