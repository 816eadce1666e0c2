from chaos.answer_data import AnswerData
from chaos.extensions import db


class Answer(db.Model):
    __tablename__ = "answers"
    __table_args__ = (
        db.UniqueConstraint("application_id", "question_id", name="uq_answer_question"),
    )

    id = db.Column(db.Integer, primary_key=True)
    application_id = db.Column(
        db.Integer, db.ForeignKey("applications.id"), nullable=False
    )
    question_id = db.Column(db.Integer, db.ForeignKey("questions.id"), nullable=False)
    answer_type = db.Column(db.String(20), nullable=False)
    answer_data = db.Column(db.JSON, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    question = db.relationship("Question")

    @property
    def value(self):
        return AnswerData(self.answer_type, self.answer_data)

    @value.setter
    def value(self, answer):
        self.answer_type = answer.answer_type
        self.answer_data = answer.to_json()

    def to_dict(self):
        return {
            "id": self.id,
            "application_id": self.application_id,
            "question_id": self.question_id,
            "answer_type": self.answer_type,
            "answer_data": self.answer_data,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
