"""Smoke check: log in as admin, upload an image, delete it again.
Run with: ADMIN_PASSWORD=... python scripts/admin_flow_check.py
"""
import os
import sys
from io import BytesIO

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from PIL import Image

from app import create_app


def make_image_bytes():
    img = Image.new('RGB', (64, 64), color=(200, 120, 40))
    buf = BytesIO()
    img.save(buf, format='PNG')
    buf.seek(0)
    return buf


def run_check(app):
    password = app.config['ADMIN_PASSWORD']
    if not password:
        print('ADMIN_PASSWORD is not set, abort')
        return 2

    with app.test_client() as c:
        r = c.post('/admin/login', json={'password': password})
        print('Login status:', r.status_code)
        if r.status_code != 200:
            return 3

        r = c.post('/admin/upload', data={
            'title': 'smoke check',
            'category': 'Test',
            'image': (make_image_bytes(), 'smoke.png'),
        }, content_type='multipart/form-data')
        print('Upload status:', r.status_code, r.get_json())
        if r.status_code != 200:
            return 4
        photo_id = r.get_json()['id']
        stored = os.path.join(app.config['UPLOAD_FOLDER'], r.get_json()['filename'])

        r = c.delete(f'/admin/delete/{photo_id}')
        print('Delete status:', r.status_code, r.get_json())
        if r.status_code != 200:
            return 5

        r = c.get('/admin/photos')
        if any(p['id'] == photo_id for p in r.get_json()):
            print('ERROR: photo still listed after delete')
            return 6
        if os.path.exists(stored):
            print('ERROR: file still on disk after delete')
            return 7

    print('OK: upload and delete round trip')
    return 0


if __name__ == '__main__':
    rc = run_check(create_app())
    print('EXIT', rc)
    sys.exit(rc)
