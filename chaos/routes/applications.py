from flask import abort, current_app, jsonify, request
from flask_login import login_required

from chaos.extensions import db
from chaos.models import Question
from chaos.models.application import APPLICATION_STATUSES
from chaos.routes.guards import (
    application_or_404,
    is_campaign_admin,
    open_application,
    owned_application,
    readable_application,
)
from chaos.services.answers import (
    AnswerConflict,
    common_answers,
    create_answer,
    parse_answer,
    role_answers,
)
from chaos.services.applications import (
    application_roles,
    replace_application_roles,
    submit_application,
)


def register_application_routes(app):
    @app.route("/api/v1/application/<int:application_id>")
    @login_required
    def get_application(application_id):
        return readable_application(application_id).to_dict()

    @app.route("/api/v1/application/<int:application_id>/answers/common")
    @login_required
    def get_common_application_answers(application_id):
        application = readable_application(application_id)
        return jsonify([answer.to_dict() for answer in common_answers(application)])

    @app.route("/api/v1/application/<int:application_id>/answers/role/<int:role_id>")
    @login_required
    def get_role_application_answers(application_id, role_id):
        application = readable_application(application_id)
        return jsonify(
            [answer.to_dict() for answer in role_answers(application, role_id)]
        )

    @app.route("/api/v1/application/<int:application_id>/answer", methods=["POST"])
    @login_required
    def create_application_answer(application_id):
        application = open_application(owned_application(application_id))
        data = request.get_json(silent=True) or {}

        try:
            question_id = int(data.get("question_id"))
        except (TypeError, ValueError):
            abort(400, description="Bad request")

        question = db.session.get(Question, question_id)
        if question is None or question.campaign_id != application.campaign_id:
            abort(400, description="Question is not part of this campaign")

        try:
            answer = parse_answer(
                question, data.get("answer_type"), data.get("answer_data")
            )
            row = create_answer(application, question, answer)
        except ValueError as error:
            abort(400, description=str(error))
        except AnswerConflict as error:
            abort(409, description=str(error))

        current_app.logger.debug(
            "Answer %s created for question %s on application %s",
            row.id,
            question.id,
            application.id,
        )
        return {"id": row.id}

    @app.route("/api/v1/application/<int:application_id>/roles")
    @login_required
    def get_application_roles(application_id):
        application = readable_application(application_id)
        return jsonify([row.to_dict() for row in application_roles(application)])

    @app.route("/api/v1/application/<int:application_id>/roles", methods=["PATCH"])
    @login_required
    def update_application_roles(application_id):
        application = open_application(owned_application(application_id))
        data = request.get_json(silent=True) or {}
        roles = data.get("roles")
        if not isinstance(roles, list):
            abort(400, description="Bad request")

        try:
            rows = replace_application_roles(application, roles)
        except ValueError as error:
            db.session.rollback()
            abort(400, description=str(error))

        return jsonify([row.to_dict() for row in rows])

    @app.route("/api/v1/application/<int:application_id>/submit", methods=["POST"])
    @login_required
    def submit(application_id):
        application = open_application(owned_application(application_id))

        try:
            submit_application(application)
        except ValueError as error:
            abort(400, description=str(error))

        current_app.logger.info("Application %s submitted", application.id)
        return {"ok": True}

    @app.route("/api/v1/application/<int:application_id>/status", methods=["PATCH"])
    @login_required
    def set_application_status(application_id):
        application = application_or_404(application_id)
        if not is_campaign_admin(application.campaign):
            abort(403, description="Forbidden operation")

        status = (request.get_json(silent=True) or {}).get("status")
        if status not in APPLICATION_STATUSES:
            abort(400, description=f"Unknown status: {status!r}")

        if request.args.get("private") == "true":
            application.private_status = status
        else:
            application.status = status
        db.session.commit()
        return application.to_dict()
