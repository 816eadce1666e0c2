from flask import abort, current_app, request
from flask_login import login_required

from chaos.routes.guards import open_application, owned_answer
from chaos.services.answers import delete_answer, parse_answer, update_answer


def register_answer_routes(app):
    @app.route("/api/v1/answer/<int:answer_id>", methods=["PATCH"])
    @login_required
    def update_application_answer(answer_id):
        row = owned_answer(answer_id)
        open_application(row.application)
        data = request.get_json(silent=True) or {}

        question_id = data.get("question_id")
        if question_id is not None and str(question_id) != str(row.question_id):
            abort(400, description="Answer belongs to a different question")

        try:
            answer = parse_answer(
                row.question, data.get("answer_type"), data.get("answer_data")
            )
        except ValueError as error:
            abort(400, description=str(error))

        update_answer(row, answer)
        return {"ok": True}

    @app.route("/api/v1/answer/<int:answer_id>", methods=["DELETE"])
    @login_required
    def delete_application_answer(answer_id):
        row = owned_answer(answer_id)
        open_application(row.application)

        delete_answer(row)
        current_app.logger.debug("Answer %s deleted", answer_id)
        return {"ok": True}
