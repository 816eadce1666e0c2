from chaos.extensions import db
from chaos.models import Answer, Application, ApplicationRole, Question, Role


def get_or_create_application(campaign, user):
    application = Application.query.filter_by(
        campaign_id=campaign.id, user_id=user.id
    ).first()
    if application:
        return application, False

    application = Application(campaign_id=campaign.id, user_id=user.id)
    db.session.add(application)
    db.session.commit()
    return application, True


def replace_application_roles(application, roles):
    """Swap the application's role preferences for ``roles`` in one go.

    ``roles`` is the payload list of ``{campaign_role_id, preference}``
    mappings. Preferences must be exactly 1..n and every role must belong to
    the application's campaign.
    """
    campaign_role_ids = {
        role.id for role in Role.query.filter_by(campaign_id=application.campaign_id)
    }

    parsed = []
    for entry in roles:
        if not isinstance(entry, dict):
            raise ValueError("Each role must be an object")
        try:
            role_id = int(entry["campaign_role_id"])
            preference = int(entry["preference"])
        except (KeyError, TypeError, ValueError):
            raise ValueError("Each role needs campaign_role_id and preference") from None

        if "application_id" in entry and entry["application_id"] is not None:
            if int(entry["application_id"]) != application.id:
                raise ValueError("Role belongs to a different application")
        if role_id not in campaign_role_ids:
            raise ValueError(f"Role {role_id} is not part of this campaign")
        parsed.append((role_id, preference))

    role_ids = [role_id for role_id, _ in parsed]
    if len(set(role_ids)) != len(role_ids):
        raise ValueError("A role can only be selected once")
    preferences = sorted(preference for _, preference in parsed)
    if preferences != list(range(1, len(parsed) + 1)):
        raise ValueError("Preferences must run from 1 without gaps")

    ApplicationRole.query.filter_by(application_id=application.id).delete()
    for role_id, preference in parsed:
        db.session.add(
            ApplicationRole(
                application_id=application.id,
                campaign_role_id=role_id,
                preference=preference,
            )
        )
    db.session.commit()
    return application_roles(application)


def application_roles(application):
    return (
        ApplicationRole.query.filter_by(application_id=application.id)
        .order_by(ApplicationRole.preference)
        .all()
    )


def missing_required_questions(application):
    role_ids = [row.campaign_role_id for row in application_roles(application)]
    required = Question.query.filter(
        Question.campaign_id == application.campaign_id,
        Question.required.is_(True),
    ).all()
    answered = {
        question_id
        for (question_id,) in db.session.query(Answer.question_id).filter_by(
            application_id=application.id
        )
    }
    return [
        question
        for question in required
        if (question.role_id is None or question.role_id in role_ids)
        and question.id not in answered
    ]


def submit_application(application):
    if not application_roles(application):
        raise ValueError("Select at least one role before submitting")

    missing = missing_required_questions(application)
    if missing:
        titles = ", ".join(question.title for question in missing)
        raise ValueError(f"Required questions are unanswered: {titles}")

    application.submitted = True
    db.session.commit()
    return application
