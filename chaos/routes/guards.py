from flask import abort
from flask_login import current_user

from chaos.extensions import db
from chaos.models import Answer, Application, Campaign, Rating


def campaign_or_404(campaign_id):
    campaign = db.session.get(Campaign, campaign_id)
    if campaign is None:
        abort(404, description="Campaign not found")
    return campaign


def is_campaign_admin(campaign):
    return campaign.organisation.admin_id == current_user.id


def admin_campaign_or_403(campaign_id):
    campaign = campaign_or_404(campaign_id)
    if not is_campaign_admin(campaign):
        abort(403, description="Forbidden operation")
    return campaign


def application_or_404(application_id):
    application = db.session.get(Application, application_id)
    if application is None:
        abort(404, description="Application not found")
    return application


def readable_application(application_id):
    application = application_or_404(application_id)
    if application.user_id != current_user.id and not is_campaign_admin(
        application.campaign
    ):
        abort(403, description="Forbidden operation")
    return application


def owned_application(application_id):
    application = application_or_404(application_id)
    if application.user_id != current_user.id:
        abort(403, description="Forbidden operation")
    return application


def open_application(application):
    if not application.campaign.is_open():
        abort(400, description="Campaign closed")
    if application.submitted:
        abort(400, description="Application closed")
    return application


def owned_answer(answer_id):
    answer = db.session.get(Answer, answer_id)
    if answer is None:
        abort(404, description="Answer not found")
    owned_application(answer.application_id)
    return answer


def reviewed_application(application_id):
    application = application_or_404(application_id)
    if not is_campaign_admin(application.campaign):
        abort(403, description="Forbidden operation")
    return application


def reviewed_rating(rating_id):
    rating = db.session.get(Rating, rating_id)
    if rating is None:
        abort(404, description="Rating not found")
    reviewed_application(rating.application_id)
    return rating


def own_rating(rating_id):
    rating = reviewed_rating(rating_id)
    if rating.rater_id != current_user.id:
        abort(403, description="Forbidden operation")
    return rating
