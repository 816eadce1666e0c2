from flask import current_app
from werkzeug.exceptions import HTTPException

from chaos.extensions import login_manager


def error_response(message, status):
    return {"ok": False, "error": message}, status


@login_manager.unauthorized_handler
def unauthorized():
    return error_response("Not logged in", 401)


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        if error.code >= 500:
            current_app.logger.error("%s %s", error.code, error.description)
        else:
            current_app.logger.info("%s %s", error.code, error.description)
        return error_response(error.description, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        current_app.logger.exception("Unhandled error")
        return error_response("Internal server error", 500)
