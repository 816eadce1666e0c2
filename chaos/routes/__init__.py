from chaos.routes.answers import register_answer_routes
from chaos.routes.applications import register_application_routes
from chaos.routes.campaigns import register_campaign_routes
from chaos.routes.ratings import register_rating_routes
from chaos.routes.users import register_user_routes


def register_routes(app):
    register_user_routes(app)
    register_campaign_routes(app)
    register_application_routes(app)
    register_answer_routes(app)
    register_rating_routes(app)
