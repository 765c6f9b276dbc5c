from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from errors import StorageError
from services import catalog
from services.cleanup import cleanup_missing_files, find_missing


def test_nothing_removed_when_all_files_exist(ctx, add_photo, row_counts):
    add_photo(likes=1)
    add_photo(comments=1)
    assert cleanup_missing_files() == 0
    assert row_counts() == (2, 1, 1)


def test_removes_row_for_missing_file_and_is_idempotent(ctx, add_photo, upload_dir, row_counts):
    add_photo(likes=1, comments=1)
    add_photo(likes=2, comments=3)
    assert cleanup_missing_files() == 0

    (upload_dir / 'photo-2.png').unlink()
    assert cleanup_missing_files() == 1
    assert row_counts() == (1, 1, 1)

    assert cleanup_missing_files() == 0
    assert row_counts() == (1, 1, 1)


def test_cleanup_never_deletes_files(ctx, add_photo, upload_dir):
    add_photo()
    stray = upload_dir / 'not-in-catalog.png'
    stray.write_bytes(b'x')
    cleanup_missing_files()
    assert stray.exists()
    assert (upload_dir / 'photo-1.png').exists()


def test_failed_row_does_not_stop_the_batch(ctx, add_photo, monkeypatch, row_counts):
    stuck = add_photo(with_file=False)
    add_photo(with_file=False)
    add_photo()
    real_delete = catalog.delete_photo

    def flaky_delete(photo_id):
        if photo_id == stuck:
            raise StorageError('Could not delete photo: database is locked')
        return real_delete(photo_id)

    monkeypatch.setattr(catalog, 'delete_photo', flaky_delete)

    assert cleanup_missing_files() == 1
    assert row_counts()[0] == 2
    assert catalog.get_photo(stuck).id == stuck


def test_find_missing(upload_dir):
    (upload_dir / 'a.png').write_bytes(b'a')
    photos = [(1, 'a.png'), (2, 'b.png'), (3, 'c.png')]
    assert find_missing(photos, str(upload_dir), workers=2) == [2, 3]
    assert find_missing([], str(upload_dir)) == []


def test_cleanup_endpoint(admin_client, add_photo, upload_dir):
    add_photo()
    add_photo()
    (upload_dir / 'photo-1.png').unlink()

    rv = admin_client.delete('/admin/cleanup')
    assert rv.status_code == 200
    assert rv.get_json() == {'message': 'Cleanup completed. Removed 1 orphaned records.', 'deletedCount': 1}

    rv = admin_client.delete('/admin/cleanup')
    assert rv.get_json()['deletedCount'] == 0


def test_cleanup_endpoint_on_empty_catalog(admin_client):
    rv = admin_client.delete('/admin/cleanup')
    assert rv.get_json() == {'message': 'No photos to check', 'deletedCount': 0}


def test_database_error_on_one_row_does_not_stop_the_batch(ctx, add_photo, monkeypatch, row_counts):
    stuck = add_photo(with_file=False)
    add_photo(with_file=False)
    real_get = Session.get

    def flaky_get(self, entity, ident, *args, **kwargs):
        if ident == stuck:
            raise OperationalError('SELECT', {}, Exception('database is locked'))
        return real_get(self, entity, ident, *args, **kwargs)

    monkeypatch.setattr(Session, 'get', flaky_get)

    assert cleanup_missing_files() == 1
    assert row_counts()[0] == 1
