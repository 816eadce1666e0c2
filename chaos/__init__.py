from flask import Flask

from chaos.config import Config
from chaos.errors import register_error_handlers
from chaos.extensions import db, login_manager, migrate
from chaos.models import User
from chaos.routes import register_routes


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    register_error_handlers(app)
    register_routes(app)
    return app


__all__ = ["create_app", "db", "migrate"]
