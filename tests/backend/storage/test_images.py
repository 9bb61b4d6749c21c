import base64

import pytest

from backend.storage.file_system import FileSystemStore
from backend.storage.images import ImageStore

PNG_BYTES = b'\x89PNG\r\n\x1a\nfake'


def test_save_image_stores_data_url_under_folder(store: FileSystemStore) -> None:
    images = ImageStore(store)

    key = images.save_image('avatar.png', PNG_BYTES, 'image/png', 'profiles')

    assert key.startswith('benigna_data/images/profiles/')
    assert key.endswith('_avatar.png')
    document = store.get(key)
    assert document['type'] == 'image/png'
    assert document['size'] == len(PNG_BYTES)
    assert 'createdAt' in document


def test_get_image_returns_data_url(store: FileSystemStore) -> None:
    images = ImageStore(store)
    key = images.save_image('avatar.png', PNG_BYTES, 'image/png', 'profiles')

    expected = 'data:image/png;base64,' + base64.b64encode(PNG_BYTES).decode('ascii')
    assert images.get_image(key) == expected


def test_get_missing_image_returns_none(store: FileSystemStore) -> None:
    assert ImageStore(store).get_image('benigna_data/images/profiles/missing.png') is None


def test_get_owner_returns_recorded_uploader(store: FileSystemStore) -> None:
    images = ImageStore(store)
    owned = images.save_image('avatar.png', PNG_BYTES, 'image/png', 'profiles', owner_id='user-1')
    anonymous = images.save_image('logo.png', PNG_BYTES, 'image/png', 'profiles')

    assert images.get_owner(owned) == 'user-1'
    assert images.get_owner(anonymous) is None
    assert images.get_owner('benigna_data/images/profiles/missing.png') is None


def test_save_image_rejects_unknown_folder(store: FileSystemStore) -> None:
    with pytest.raises(ValueError):
        ImageStore(store).save_image('a.png', PNG_BYTES, 'image/png', 'documents')


def test_save_image_strips_path_separators(store: FileSystemStore) -> None:
    key = ImageStore(store).save_image('../../users/evil.png', PNG_BYTES, 'image/png', 'donations')

    assert key.startswith('benigna_data/images/donations/')
    assert '/users/' not in key


def test_list_files_excludes_directory_marker(store: FileSystemStore) -> None:
    store.initialize_directories()
    images = ImageStore(store)
    key = images.save_image('front.jpg', b'jpeg', 'image/jpeg', 'institutions')

    assert images.list_files('institutions') == [key]
    assert images.list_files('profiles') == []


def test_delete_image_removes_it_once(store: FileSystemStore) -> None:
    images = ImageStore(store)
    key = images.save_image('front.jpg', b'jpeg', 'image/jpeg', 'institutions')

    assert images.delete_image(key) is True
    assert images.get_image(key) is None
    assert images.delete_image(key) is False


def test_delete_image_refuses_keys_outside_images(store: FileSystemStore) -> None:
    store.put('benigna_data/users/1.json', {'id': '1'})

    assert ImageStore(store).delete_image('benigna_data/users/1.json') is False
    assert store.get('benigna_data/users/1.json') == {'id': '1'}
