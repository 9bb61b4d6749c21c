from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from backend.auth.dependencies import get_current_user
from backend.core import config
from backend.core.errors import BenignaError
from backend.dependencies import get_store
from backend.models.user import User, UserRole
from backend.routes.errors import to_http_exception
from backend.storage.file_system import IMAGE_FOLDERS, FileSystemStore
from backend.storage.images import ImageStore

router = APIRouter(tags=['images'])

ALLOWED_CONTENT_TYPES = {'image/png', 'image/jpeg', 'image/gif', 'image/webp'}


def validate_folder(folder: str) -> str:
    if folder not in IMAGE_FOLDERS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Unknown image folder.')
    return folder


@router.post('/{folder}', status_code=status.HTTP_201_CREATED)
async def upload_image(
    folder: str,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    store: FileSystemStore = Depends(get_store),
):
    validate_folder(folder)

    content_type = file.content_type or ''
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Only PNG, JPEG, GIF or WebP images are accepted.')

    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Uploaded file is empty.')
    if len(content) > config.MAX_IMAGE_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail='Image is too large.')

    try:
        key = ImageStore(store).save_image(
            file.filename or 'upload',
            content,
            content_type,
            folder,
            owner_id=current_user.id,
        )
    except BenignaError as exc:
        raise to_http_exception(exc) from exc

    return {'path': key}


@router.get('/')
def get_image(path: str = Query(...), store: FileSystemStore = Depends(get_store)):
    data = ImageStore(store).get_image(path)
    if data is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Image not found.')
    return {'path': path, 'data': data}


@router.delete('/', status_code=status.HTTP_204_NO_CONTENT)
def delete_image(
    path: str = Query(...),
    current_user: User = Depends(get_current_user),
    store: FileSystemStore = Depends(get_store),
):
    images = ImageStore(store)
    if images.get_image(path) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Image not found.')
    # Images without a recorded uploader can only be removed by an admin.
    if current_user.type != UserRole.ADMIN and images.get_owner(path) != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='Only the uploader or an admin can delete this image.',
        )
    if not images.delete_image(path):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Image not found.')


@router.get('/{folder}')
def list_images(folder: str, store: FileSystemStore = Depends(get_store)):
    return ImageStore(store).list_files(validate_folder(folder))
