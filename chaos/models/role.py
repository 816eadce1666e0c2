from chaos.extensions import db


class Role(db.Model):
    __tablename__ = "roles"

    id = db.Column(db.Integer, primary_key=True)
    campaign_id = db.Column(db.Integer, db.ForeignKey("campaigns.id"), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    min_available = db.Column(db.Integer, nullable=False, default=1)
    max_available = db.Column(db.Integer, nullable=False, default=1)

    questions = db.relationship("Question", backref="role", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "campaign_id": self.campaign_id,
            "name": self.name,
            "description": self.description,
            "min_available": self.min_available,
            "max_available": self.max_available,
        }
