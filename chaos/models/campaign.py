from datetime import datetime, timezone

from chaos.extensions import db


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Campaign(db.Model):
    __tablename__ = "campaigns"

    id = db.Column(db.Integer, primary_key=True)
    organisation_id = db.Column(
        db.Integer, db.ForeignKey("organisations.id"), nullable=False
    )
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    starts_at = db.Column(db.DateTime, nullable=False)
    ends_at = db.Column(db.DateTime, nullable=False)

    roles = db.relationship("Role", backref="campaign", lazy=True)
    questions = db.relationship("Question", backref="campaign", lazy=True)
    applications = db.relationship("Application", backref="campaign", lazy=True)

    def is_open(self, now=None):
        now = now or utcnow()
        return self.starts_at <= now <= self.ends_at

    def to_dict(self):
        return {
            "id": self.id,
            "organisation_id": self.organisation_id,
            "name": self.name,
            "description": self.description,
            "starts_at": self.starts_at.isoformat(),
            "ends_at": self.ends_at.isoformat(),
        }
