"""Catalog store: photo, comment and like rows.

Every write commits on its own. A failing write rolls the session back and is
reported as ``StorageError`` so callers never see a half-applied change.
"""

import os

from flask import current_app
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from errors import NotFoundError, StorageError, ValidationError
from extensions import db
from models.interaction import Comment, Like
from models.photo import Photo


def _commit(action):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StorageError(f"Could not {action}: {e}") from e


def add_photo(title, category, filename):
    photo = Photo(title=title, category=category, filename=filename)
    db.session.add(photo)
    _commit("save photo")
    return photo


def get_photo(photo_id):
    try:
        photo = db.session.get(Photo, photo_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StorageError(f"Could not load photo: {e}") from e
    if photo is None:
        raise NotFoundError("Photo not found")
    return photo


def add_comment(photo_id, text):
    body = text.strip() if isinstance(text, str) else ""
    if not body:
        raise ValidationError("Comment cannot be empty")
    get_photo(photo_id)
    comment = Comment(photo_id=photo_id, body=body)
    db.session.add(comment)
    _commit("add comment")
    return comment


def add_like(photo_id):
    get_photo(photo_id)
    like = Like(photo_id=photo_id)
    db.session.add(like)
    _commit("add like")
    return like


def list_comments(photo_id):
    stmt = (
        select(Comment)
        .where(Comment.photo_id == photo_id)
        .order_by(Comment.comment_date.desc(), Comment.id.desc())
    )
    return db.session.scalars(stmt).all()


def count_likes(photo_id):
    return db.session.scalar(select(func.count(Like.id)).where(Like.photo_id == photo_id))


def count_comments(photo_id):
    return db.session.scalar(select(func.count(Comment.id)).where(Comment.photo_id == photo_id))


def delete_photo(photo_id):
    """Remove a photo row together with its comments and likes.

    Returns the deleted photo's filename, read before the row is gone.
    """
    photo = get_photo(photo_id)
    filename = photo.filename
    db.session.delete(photo)
    _commit("delete photo")
    current_app.logger.info("PHOTO_DELETED photo_id=%d filename=%s", photo_id, filename)
    return filename


def delete_photo_and_file(photo_id, upload_folder):
    """Administrative delete: the row (and its dependents) first, then the file.

    A file that is already gone is fine, the end state is the same.
    """
    filename = delete_photo(photo_id)
    path = os.path.join(upload_folder, filename)
    try:
        os.remove(path)
    except FileNotFoundError:
        current_app.logger.warning("DELETE_FILE_MISSING photo_id=%d path=%s", photo_id, path)
    except OSError as e:
        raise StorageError(f"Photo record deleted but file could not be removed: {e}") from e
    return filename


def count_photos():
    return db.session.scalar(select(func.count(Photo.id)))
