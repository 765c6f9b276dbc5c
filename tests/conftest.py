from datetime import datetime, timedelta
from io import BytesIO

import pytest
from PIL import Image

from app import create_app
from extensions import db
from models.interaction import Comment, Like
from models.photo import Photo


def make_image_bytes(format='PNG'):
    img = Image.new('RGB', (100, 100), color=(123, 222, 64))
    buf = BytesIO()
    img.save(buf, format=format)
    buf.seek(0)
    return buf


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / 'uploads'
    path.mkdir()
    return path


@pytest.fixture
def app(tmp_path, upload_dir):
    application = create_app(
        'config.TestConfig',
        UPLOAD_FOLDER=str(upload_dir),
        SQLALCHEMY_DATABASE_URI='sqlite:///' + str(tmp_path / 'gallery.db'),
    )
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    # Service-level tests only. HTTP tests must not hold a context open across
    # requests, Flask-Login caches the current user on ``g``.
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    c = app.test_client()
    rv = c.post('/admin/login', json={'password': app.config['ADMIN_PASSWORD']})
    assert rv.status_code == 200
    return c


@pytest.fixture
def add_photo(app, upload_dir):
    """Insert a photo row directly, optionally with its file on disk. Returns the id."""
    counter = {'n': 0}
    base = datetime(2024, 1, 1, 12, 0, 0)

    def _add(title='Sunset', category='Nature', with_file=True, likes=0, comments=0):
        counter['n'] += 1
        filename = f'photo-{counter["n"]}.png'
        if with_file:
            (upload_dir / filename).write_bytes(make_image_bytes().getvalue())
        with app.app_context():
            photo = Photo(
                title=title,
                category=category,
                filename=filename,
                upload_date=base + timedelta(minutes=counter['n']),
            )
            db.session.add(photo)
            db.session.flush()
            for _ in range(likes):
                db.session.add(Like(photo_id=photo.id))
            for i in range(comments):
                db.session.add(Comment(photo_id=photo.id, body=f'comment {i}'))
            db.session.commit()
            return photo.id

    return _add


@pytest.fixture
def row_counts(app):
    def _counts():
        with app.app_context():
            return (
                db.session.query(Photo).count(),
                db.session.query(Comment).count(),
                db.session.query(Like).count(),
            )

    return _counts
