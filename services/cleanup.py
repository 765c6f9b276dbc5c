"""Drop photo rows whose image file has disappeared from the upload folder."""

import os
from concurrent.futures import ThreadPoolExecutor

from flask import current_app
from sqlalchemy import select

from errors import GalleryError
from extensions import db
from models.photo import Photo
from services import catalog


def find_missing(photos, upload_folder, workers=8):
    """Check every ``(id, filename)`` pair and return the ids whose file is gone.

    All checks finish before this returns.
    """
    if not photos:
        return []
    paths = [os.path.join(upload_folder, filename) for _, filename in photos]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        exists = list(pool.map(os.path.exists, paths))
    return [photo_id for (photo_id, _), present in zip(photos, exists) if not present]


def cleanup_missing_files(upload_folder=None):
    """Delete the rows (and their comments/likes) of photos with no file on disk.

    Files are never touched. A row that fails to delete is logged and
    skipped; the rest are still processed. Returns how many rows went away.
    """
    config = current_app.config
    upload_folder = upload_folder or config["UPLOAD_FOLDER"]
    photos = db.session.execute(select(Photo.id, Photo.filename)).all()
    missing = find_missing(photos, upload_folder, workers=config["CLEANUP_WORKERS"])

    deleted = 0
    for photo_id in missing:
        try:
            catalog.delete_photo(photo_id)
        except GalleryError as e:
            current_app.logger.warning("CLEANUP_SKIPPED photo_id=%d error=%s", photo_id, e.message)
            continue
        deleted += 1

    current_app.logger.info("CLEANUP_DONE checked=%d missing=%d deleted=%d", len(photos), len(missing), deleted)
    return deleted
