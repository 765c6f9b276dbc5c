"""Upload pipeline: validate an image, store it, record it.

The file is only written once every check has passed, and it is removed again
if the photo row cannot be inserted, so a failed upload never leaves a stray
file in the upload folder.
"""

import os
import secrets
import time

from flask import current_app

from errors import StorageError, ValidationError, too_large_message
from services import catalog


def file_extension(filename):
    """Lower-cased extension without the dot, or '' when there is none."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def allowed_file(file_storage, allowed_extensions, allowed_mimetypes):
    # Both must pass: a renamed .exe with an image mimetype is rejected, and so is the reverse.
    ext_ok = file_extension(file_storage.filename) in allowed_extensions
    type_ok = (file_storage.mimetype or "").lower() in allowed_mimetypes
    return ext_ok and type_ok


def stream_size(file_storage):
    stream = file_storage.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def generate_filename(ext, upload_folder):
    """``<epoch millis>-<random>.<ext>``, retried until it names no existing file."""
    while True:
        name = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}.{ext}"
        if not os.path.exists(os.path.join(upload_folder, name)):
            return name


def _remove_quietly(path):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


def save_upload(title, category, file_storage, upload_folder=None):
    config = current_app.config
    upload_folder = upload_folder or config["UPLOAD_FOLDER"]
    title = (title or "").strip()
    category = (category or "").strip()

    if file_storage is None or not file_storage.filename:
        raise ValidationError("No image file uploaded")
    if not title or not category:
        raise ValidationError("Title and category are required")
    if not allowed_file(file_storage, config["ALLOWED_EXTENSIONS"], config["ALLOWED_MIMETYPES"]):
        current_app.logger.warning(
            "UPLOAD_REJECTED reason=type filename=%s mimetype=%s", file_storage.filename, file_storage.mimetype
        )
        raise ValidationError("Only image files are allowed!")
    size = stream_size(file_storage)
    if size > config["MAX_UPLOAD_BYTES"]:
        current_app.logger.warning("UPLOAD_REJECTED reason=size filename=%s size=%d", file_storage.filename, size)
        raise ValidationError(too_large_message(config["MAX_UPLOAD_BYTES"]))

    os.makedirs(upload_folder, exist_ok=True)
    filename = generate_filename(file_extension(file_storage.filename), upload_folder)
    path = os.path.join(upload_folder, filename)
    try:
        file_storage.save(path)
    except OSError as e:
        _remove_quietly(path)
        raise StorageError(f"Could not store image: {e}") from e

    try:
        photo = catalog.add_photo(title, category, filename)
    except Exception:
        current_app.logger.error("UPLOAD_ROLLBACK filename=%s", filename)
        _remove_quietly(path)
        raise

    current_app.logger.info("UPLOAD_STORED photo_id=%d filename=%s size=%d", photo.id, filename, size)
    return photo
