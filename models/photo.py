from datetime import datetime, timezone

from extensions import db


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Photo(db.Model):
    __tablename__ = "photos"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(100), nullable=False, index=True)
    filename = db.Column(db.String(255), nullable=False, unique=True)
    upload_date = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    # likes/comments go away with the photo, both in the ORM and via ON DELETE CASCADE
    comments = db.relationship("Comment", backref="photo", lazy=True, cascade="all, delete-orphan")
    likes = db.relationship("Like", backref="photo", lazy=True, cascade="all, delete-orphan")

    def to_dict(self, like_count=None, comment_count=None):
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "filename": self.filename,
            "url": f"/uploads/{self.filename}",
            "upload_date": self.upload_date.isoformat(),
            "like_count": len(self.likes) if like_count is None else like_count,
            "comment_count": len(self.comments) if comment_count is None else comment_count,
        }

    def __repr__(self):
        return f"<Photo {self.id} {self.filename}>"
