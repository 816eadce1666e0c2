from flask import abort, current_app, request
from flask_login import current_user, login_required

from chaos.routes.guards import own_rating, reviewed_application, reviewed_rating
from chaos.services.ratings import (
    application_ratings,
    create_rating,
    delete_rating,
    parse_rating,
    update_rating,
)


def _rating_from_request():
    try:
        return parse_rating(request.get_json(silent=True))
    except ValueError as error:
        abort(400, description=str(error))


def register_rating_routes(app):
    @app.route("/api/v1/application/<int:application_id>/rating", methods=["POST"])
    @login_required
    def create_application_rating(application_id):
        application = reviewed_application(application_id)
        rating, comment = _rating_from_request()

        row = create_rating(application, current_user, rating, comment)
        current_app.logger.info(
            "User %s rated application %s: %s", current_user.id, application.id, rating
        )
        return {"id": row.id}, 201

    @app.route("/api/v1/application/<int:application_id>/ratings")
    @login_required
    def get_application_ratings(application_id):
        application = reviewed_application(application_id)
        return {"ratings": [row.to_dict() for row in application_ratings(application)]}

    @app.route("/api/v1/rating/<int:rating_id>")
    @login_required
    def get_rating(rating_id):
        return reviewed_rating(rating_id).to_dict()

    @app.route("/api/v1/rating/<int:rating_id>", methods=["PUT"])
    @login_required
    def update_application_rating(rating_id):
        row = own_rating(rating_id)
        rating, comment = _rating_from_request()

        update_rating(row, rating, comment)
        return {"ok": True}

    @app.route("/api/v1/rating/<int:rating_id>", methods=["DELETE"])
    @login_required
    def delete_application_rating(rating_id):
        row = own_rating(rating_id)

        delete_rating(row)
        current_app.logger.debug("Rating %s deleted", rating_id)
        return {"ok": True}
