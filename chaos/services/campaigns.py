from chaos.answer_data import CHOICE_TYPES, QUESTION_TYPES
from chaos.extensions import db
from chaos.models import Question, QuestionOption, Role


def create_role(campaign, name, description=None, min_available=1, max_available=1):
    name = (name or "").strip()
    if not name:
        raise ValueError("Role name is required")
    if min_available < 0 or max_available < min_available:
        raise ValueError("Role availability must satisfy 0 <= min <= max")

    role = Role(
        campaign_id=campaign.id,
        name=name,
        description=description,
        min_available=min_available,
        max_available=max_available,
    )
    db.session.add(role)
    db.session.commit()
    return role


def create_question(
    campaign,
    question_type,
    title,
    description=None,
    required=False,
    role_id=None,
    options=None,
):
    title = (title or "").strip()
    if not title:
        raise ValueError("Question title is required")
    if question_type not in QUESTION_TYPES:
        raise ValueError(f"Unknown question type: {question_type!r}")

    if role_id is not None:
        role = Role.query.filter_by(id=role_id, campaign_id=campaign.id).first()
        if not role:
            raise ValueError(f"Role {role_id} is not part of this campaign")

    option_texts = [text.strip() for text in (options or []) if text and text.strip()]
    if question_type in CHOICE_TYPES and not option_texts:
        raise ValueError("Invalid number of options.")

    display_order = Question.query.filter_by(
        campaign_id=campaign.id, role_id=role_id
    ).count()
    question = Question(
        campaign_id=campaign.id,
        role_id=role_id,
        question_type=question_type,
        title=title,
        description=description,
        required=bool(required),
        display_order=display_order,
    )
    db.session.add(question)
    db.session.flush()

    if question_type in CHOICE_TYPES:
        for index, text in enumerate(option_texts):
            db.session.add(
                QuestionOption(question_id=question.id, text=text, display_order=index)
            )

    db.session.commit()
    return question


def common_questions(campaign):
    return (
        Question.query.filter_by(campaign_id=campaign.id, role_id=None)
        .order_by(Question.display_order, Question.id)
        .all()
    )


def role_questions(campaign, role_id):
    return (
        Question.query.filter_by(campaign_id=campaign.id, role_id=role_id)
        .order_by(Question.display_order, Question.id)
        .all()
    )
