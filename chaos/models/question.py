from chaos.answer_data import CHOICE_TYPES
from chaos.extensions import db


class Question(db.Model):
    __tablename__ = "questions"

    id = db.Column(db.Integer, primary_key=True)
    campaign_id = db.Column(db.Integer, db.ForeignKey("campaigns.id"), nullable=False)
    # NULL role means the question is common to the whole campaign
    role_id = db.Column(db.Integer, db.ForeignKey("roles.id"), nullable=True)
    question_type = db.Column(db.String(20), nullable=False)
    title = db.Column(db.String(500), nullable=False)
    description = db.Column(db.Text, nullable=True)
    required = db.Column(db.Boolean, nullable=False, default=False)
    display_order = db.Column(db.Integer, nullable=False, default=0)

    options = db.relationship(
        "QuestionOption",
        backref="question",
        lazy=True,
        order_by="QuestionOption.display_order",
        cascade="all, delete-orphan",
    )

    @property
    def common(self):
        return self.role_id is None

    def to_dict(self):
        data = {
            "id": self.id,
            "campaign_id": self.campaign_id,
            "role_id": self.role_id,
            "common": self.common,
            "question_type": self.question_type,
            "title": self.title,
            "description": self.description,
            "required": self.required,
            "display_order": self.display_order,
        }
        if self.question_type in CHOICE_TYPES:
            data["data"] = {"options": [option.to_dict() for option in self.options]}
        return data


class QuestionOption(db.Model):
    __tablename__ = "question_options"

    id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.Integer, db.ForeignKey("questions.id"), nullable=False)
    text = db.Column(db.String(200), nullable=False)
    display_order = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {"id": self.id, "text": self.text, "display_order": self.display_order}
