from sqlalchemy.exc import IntegrityError

from chaos.answer_data import AnswerData
from chaos.extensions import db
from chaos.models import Answer, Question


class AnswerConflict(Exception):
    pass


def parse_answer(question, answer_type, raw_data):
    if answer_type != question.question_type:
        raise ValueError(
            f"Answer type {answer_type!r} does not match question type "
            f"{question.question_type!r}"
        )
    answer = AnswerData.parse(answer_type, raw_data)
    answer.validate([option.id for option in question.options])
    return answer


def _existing_answer(application, question):
    return Answer.query.filter_by(
        application_id=application.id, question_id=question.id
    ).first()


def create_answer(application, question, answer):
    question_id = question.id
    existing = _existing_answer(application, question)
    if existing:
        raise AnswerConflict(
            f"Question {question.id} is already answered (answer {existing.id})"
        )

    row = Answer(application_id=application.id, question_id=question.id)
    row.value = answer
    db.session.add(row)
    try:
        db.session.commit()
    except IntegrityError:
        # a concurrent request created the row between the lookup and the insert
        db.session.rollback()
        raise AnswerConflict(f"Question {question_id} is already answered") from None
    return row


def update_answer(row, answer):
    row.value = answer
    db.session.commit()
    return row


def delete_answer(row):
    db.session.delete(row)
    db.session.commit()


def common_answers(application):
    return (
        Answer.query.join(Question, Answer.question_id == Question.id)
        .filter(Answer.application_id == application.id, Question.role_id.is_(None))
        .order_by(Question.display_order, Question.id)
        .all()
    )


def role_answers(application, role_id):
    return (
        Answer.query.join(Question, Answer.question_id == Question.id)
        .filter(Answer.application_id == application.id, Question.role_id == role_id)
        .order_by(Question.display_order, Question.id)
        .all()
    )
