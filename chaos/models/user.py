from flask_login import UserMixin

from chaos.extensions import db


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    display_name = db.Column(db.String(200), nullable=False)
    zid = db.Column(db.String(20), nullable=True)
    degree_name = db.Column(db.String(200), nullable=True)

    applications = db.relationship("Application", backref="user", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "display_name": self.display_name,
            "zid": self.zid,
            "degree_name": self.degree_name,
        }
