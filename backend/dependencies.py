from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from backend.database import SessionLocal
from backend.services.app_state import AppState
from backend.storage.file_system import FileSystemStore


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> FileSystemStore:
    return FileSystemStore(db)


def get_app_state(request: Request) -> AppState:
    app_state = getattr(request.app.state, 'data', None)
    if app_state is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Storage unavailable. Verify DATABASE_URL.',
        )
    return app_state
