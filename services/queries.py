"""Photo listings with live like and comment counts.

Counts come from correlated subqueries, so a photo with no likes or comments
still shows up with zeros and nothing is ever double counted the way a
likes x comments join would.
"""

from sqlalchemy import func, or_, select

from extensions import db
from models.interaction import Comment, Like
from models.photo import Photo


def _like_count():
    return (
        select(func.count(Like.id))
        .where(Like.photo_id == Photo.id)
        .correlate(Photo)
        .scalar_subquery()
        .label("like_count")
    )


def _comment_count():
    return (
        select(func.count(Comment.id))
        .where(Comment.photo_id == Photo.id)
        .correlate(Photo)
        .scalar_subquery()
        .label("comment_count")
    )


def _with_counts():
    return select(Photo, _like_count(), _comment_count())


def _serialize(rows):
    return [photo.to_dict(like_count=likes, comment_count=comments) for photo, likes, comments in rows]


def list_photos(category=None, sort=None, search=None):
    """Gallery listing.

    ``category`` of ``"all"`` (or empty) means every category. ``search`` is a
    case-insensitive substring match on title or category. ``sort="oldest"``
    lists oldest first; anything else falls back to newest first.
    """
    stmt = _with_counts()
    if category and category != "all":
        stmt = stmt.where(Photo.category == category)
    if search:
        stmt = stmt.where(
            or_(
                Photo.title.icontains(search, autoescape=True),
                Photo.category.icontains(search, autoescape=True),
            )
        )
    if sort == "oldest":
        stmt = stmt.order_by(Photo.upload_date.asc(), Photo.id.asc())
    else:
        stmt = stmt.order_by(Photo.upload_date.desc(), Photo.id.desc())
    return _serialize(db.session.execute(stmt).all())


def list_admin_photos():
    stmt = _with_counts().order_by(Photo.upload_date.desc(), Photo.id.desc())
    return _serialize(db.session.execute(stmt).all())
