from flask_login import current_user, login_required


def register_user_routes(app):
    @app.route("/api/v1/user")
    @login_required
    def self_info():
        return current_user.to_dict()
