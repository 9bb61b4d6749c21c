import base64
import logging
import time
from datetime import datetime, timezone

from backend.core.errors import StorageError
from backend.storage.file_system import DIRECTORY_MARKER, IMAGE_FOLDERS, FileSystemStore

logger = logging.getLogger(__name__)


class ImageStore:
    """Images kept as data-URL documents under ``<base>/images/<folder>/``."""

    def __init__(self, store: FileSystemStore):
        self.store = store

    def folder_prefix(self, folder: str) -> str:
        if folder not in IMAGE_FOLDERS:
            raise ValueError(f'Unknown image folder: {folder}')
        return f'{self.store.base_dir}/images/{folder}/'

    def save_image(
        self,
        filename: str,
        content: bytes,
        content_type: str,
        folder: str,
        owner_id: str | None = None,
    ) -> str:
        safe_name = filename.replace('/', '_').replace('\\', '_') or 'upload'
        stored_name = f'{int(time.time() * 1000)}_{safe_name}'
        key = f'{self.folder_prefix(folder)}{stored_name}'

        encoded = base64.b64encode(content).decode('ascii')
        self.store.put(key, {
            'name': stored_name,
            'data': f'data:{content_type};base64,{encoded}',
            'type': content_type,
            'size': len(content),
            'uploadedBy': owner_id,
            'createdAt': datetime.now(timezone.utc).isoformat(),
        })
        return key

    def get_image(self, key: str) -> str | None:
        document = self.store.get(key)
        if not isinstance(document, dict):
            return None
        return document.get('data')

    def get_owner(self, key: str) -> str | None:
        """Id of the user who uploaded the image, if it was recorded."""
        document = self.store.get(key)
        if not isinstance(document, dict):
            return None
        return document.get('uploadedBy')

    def delete_image(self, key: str) -> bool:
        if not key.startswith(f'{self.store.base_dir}/images/') or key.endswith(DIRECTORY_MARKER):
            return False
        if self.store.get(key) is None:
            return False
        try:
            self.store.delete(key)
        except StorageError:
            logger.error('Error deleting image %s', key)
            return False
        return True

    def list_files(self, folder: str) -> list[str]:
        return [
            key for key in self.store.keys(self.folder_prefix(folder))
            if not key.endswith(f'/{DIRECTORY_MARKER}')
        ]
