import pytest

from backend.core.errors import StorageQuotaExceededError
from backend.models.storage_entry import StorageEntry
from backend.storage.file_system import DIRECTORY_MARKER, ENTITY_COLLECTIONS, FileSystemStore


def test_entity_key_builds_path_like_key(store: FileSystemStore) -> None:
    assert store.entity_key('users', 'abc') == 'benigna_data/users/abc.json'
    assert store.collection_prefix('donations') == 'benigna_data/donations/'


def test_put_then_get_returns_document(store: FileSystemStore) -> None:
    store.put('benigna_data/users/1.json', {'id': '1', 'name': 'Ana'})

    assert store.get('benigna_data/users/1.json') == {'id': '1', 'name': 'Ana'}


def test_put_overwrites_existing_key(store: FileSystemStore, db) -> None:
    store.put('benigna_data/users/1.json', {'name': 'Ana'})
    store.put('benigna_data/users/1.json', {'name': 'Ana Maria'})

    assert store.get('benigna_data/users/1.json') == {'name': 'Ana Maria'}
    assert db.query(StorageEntry).count() == 1


def test_get_missing_key_returns_none(store: FileSystemStore) -> None:
    assert store.get('benigna_data/users/missing.json') is None


def test_get_corrupt_document_returns_none(store: FileSystemStore, db) -> None:
    db.add(StorageEntry(key='benigna_data/users/broken.json', value='{not json', size_bytes=9))
    db.commit()

    assert store.get('benigna_data/users/broken.json') is None


def test_scan_returns_documents_in_insertion_order(store: FileSystemStore) -> None:
    store.put('benigna_data/ratings/b.json', {'id': 'b'})
    store.put('benigna_data/users/x.json', {'id': 'x'})
    store.put('benigna_data/ratings/a.json', {'id': 'a'})

    assert store.scan('benigna_data/ratings/') == [{'id': 'b'}, {'id': 'a'}]


def test_scan_ignores_directory_markers(store: FileSystemStore) -> None:
    store.create_directory('benigna_data/ratings')
    store.put('benigna_data/ratings/a.json', {'id': 'a'})

    assert store.scan('benigna_data/ratings/') == [{'id': 'a'}]


def test_scan_with_corrupt_document_returns_empty_list(store: FileSystemStore, db) -> None:
    store.put('benigna_data/ratings/a.json', {'id': 'a'})
    db.add(StorageEntry(key='benigna_data/ratings/broken.json', value='oops', size_bytes=4))
    db.commit()

    assert store.scan('benigna_data/ratings/') == []


def test_delete_removes_key(store: FileSystemStore) -> None:
    store.put('benigna_data/users/1.json', {'id': '1'})

    store.delete('benigna_data/users/1.json')

    assert store.get('benigna_data/users/1.json') is None


def test_delete_missing_key_is_a_no_op(store: FileSystemStore) -> None:
    store.delete('benigna_data/users/missing.json')


def test_clear_only_removes_matching_prefixes(store: FileSystemStore) -> None:
    store.put('benigna_data/users/1.json', {'id': '1'})
    store.put('benigna_data/donations/2.json', {'id': '2'})
    store.put('benigna_data/images/profiles/3_a.png', {'data': 'x'})

    removed = store.clear(['benigna_data/users/', 'benigna_data/donations/'])

    assert removed == 2
    assert store.keys('benigna_data/') == ['benigna_data/images/profiles/3_a.png']


def test_initialize_directories_creates_every_marker_once(store: FileSystemStore) -> None:
    store.initialize_directories()
    first_markers = store.keys('benigna_data/')
    created = {key: store.get(key) for key in first_markers}

    store.initialize_directories()

    assert store.keys('benigna_data/') == first_markers
    assert {key: store.get(key) for key in first_markers} == created
    for collection in ENTITY_COLLECTIONS:
        assert f'benigna_data/{collection}/{DIRECTORY_MARKER}' in first_markers
    assert f'benigna_data/images/profiles/{DIRECTORY_MARKER}' in first_markers
    assert 'created' in created[f'benigna_data/users/{DIRECTORY_MARKER}']


def test_base_dir_isolates_namespaces(db) -> None:
    first = FileSystemStore(db, base_dir='first')
    second = FileSystemStore(db, base_dir='second')

    first.put(first.entity_key('users', '1'), {'id': '1'})

    assert second.scan(second.collection_prefix('users')) == []
    assert first.scan(first.collection_prefix('users')) == [{'id': '1'}]


def test_put_beyond_quota_raises(db) -> None:
    store = FileSystemStore(db, quota_bytes=50)
    store.put('benigna_data/users/1.json', {'a': 1})

    with pytest.raises(StorageQuotaExceededError):
        store.put('benigna_data/users/2.json', {'bio': 'x' * 100})

    assert store.get('benigna_data/users/2.json') is None
    assert store.usage_bytes() == len('{\n  "a": 1\n}')


def test_shrinking_write_is_allowed_over_quota(db) -> None:
    store = FileSystemStore(db, quota_bytes=30)
    store.put('benigna_data/users/1.json', {'bio': 'x' * 10})

    store.put('benigna_data/users/1.json', {'bio': 'x'})

    assert store.get('benigna_data/users/1.json') == {'bio': 'x'}
