from chaos.extensions import db

MIN_RATING = 1
MAX_RATING = 5


class Rating(db.Model):
    __tablename__ = "application_ratings"

    id = db.Column(db.Integer, primary_key=True)
    application_id = db.Column(
        db.Integer, db.ForeignKey("applications.id"), nullable=False
    )
    rater_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    rating = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    rater = db.relationship("User")

    def to_dict(self):
        return {
            "id": self.id,
            "application_id": self.application_id,
            "rater_id": self.rater_id,
            "rater_name": self.rater.display_name if self.rater else None,
            "rating": self.rating,
            "comment": self.comment,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
