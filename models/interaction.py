from extensions import db
from models.photo import utcnow


class Comment(db.Model):
    __tablename__ = "comments"

    id = db.Column(db.Integer, primary_key=True)
    photo_id = db.Column(db.Integer, db.ForeignKey("photos.id", ondelete="CASCADE"), nullable=False, index=True)
    body = db.Column(db.Text, nullable=False)
    comment_date = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "photo_id": self.photo_id,
            "comment": self.body,
            "comment_date": self.comment_date.isoformat(),
        }


# No viewer identity: every click is its own row, so there is nothing to "unlike".
class Like(db.Model):
    __tablename__ = "likes"

    id = db.Column(db.Integer, primary_key=True)
    photo_id = db.Column(db.Integer, db.ForeignKey("photos.id", ondelete="CASCADE"), nullable=False, index=True)
    like_date = db.Column(db.DateTime, nullable=False, default=utcnow)
