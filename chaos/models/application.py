from chaos.extensions import db

PENDING = "Pending"
REJECTED = "Rejected"
SUCCESSFUL = "Successful"
APPLICATION_STATUSES = (PENDING, REJECTED, SUCCESSFUL)


class Application(db.Model):
    __tablename__ = "applications"
    __table_args__ = (
        db.UniqueConstraint("campaign_id", "user_id", name="uq_application_campaign_user"),
    )

    id = db.Column(db.Integer, primary_key=True)
    campaign_id = db.Column(db.Integer, db.ForeignKey("campaigns.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=PENDING)
    private_status = db.Column(db.String(20), nullable=False, default=PENDING)
    submitted = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())

    roles = db.relationship(
        "ApplicationRole",
        backref="application",
        lazy=True,
        order_by="ApplicationRole.preference",
        cascade="all, delete-orphan",
    )
    answers = db.relationship(
        "Answer", backref="application", lazy=True, cascade="all, delete-orphan"
    )
    ratings = db.relationship(
        "Rating",
        backref="application",
        lazy=True,
        order_by="Rating.id",
        cascade="all, delete-orphan",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "campaign_id": self.campaign_id,
            "user_id": self.user_id,
            "status": self.status,
            "private_status": self.private_status,
            "submitted": self.submitted,
        }


class ApplicationRole(db.Model):
    __tablename__ = "application_roles"
    __table_args__ = (
        db.UniqueConstraint(
            "application_id", "campaign_role_id", name="uq_application_role"
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    application_id = db.Column(
        db.Integer, db.ForeignKey("applications.id"), nullable=False
    )
    campaign_role_id = db.Column(db.Integer, db.ForeignKey("roles.id"), nullable=False)
    preference = db.Column(db.Integer, nullable=False)

    role = db.relationship("Role")

    def to_dict(self):
        return {
            "id": self.id,
            "application_id": self.application_id,
            "campaign_role_id": self.campaign_role_id,
            "preference": self.preference,
        }
