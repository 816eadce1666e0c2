from flask import abort, current_app, jsonify, request
from flask_login import current_user, login_required

from chaos.models import Application, Role
from chaos.routes.guards import admin_campaign_or_403, campaign_or_404
from chaos.services.applications import get_or_create_application
from chaos.services.campaigns import (
    common_questions,
    create_question,
    create_role,
    role_questions,
)


def register_campaign_routes(app):
    @app.route("/api/v1/campaign/<int:campaign_id>")
    @login_required
    def get_campaign(campaign_id):
        return campaign_or_404(campaign_id).to_dict()

    @app.route("/api/v1/campaign/<int:campaign_id>/roles")
    @login_required
    def get_campaign_roles(campaign_id):
        campaign = campaign_or_404(campaign_id)
        roles = Role.query.filter_by(campaign_id=campaign.id).order_by(Role.id).all()
        return jsonify([role.to_dict() for role in roles])

    @app.route("/api/v1/campaign/<int:campaign_id>/role", methods=["POST"])
    @login_required
    def create_campaign_role(campaign_id):
        campaign = admin_campaign_or_403(campaign_id)
        data = request.get_json(silent=True) or {}

        try:
            role = create_role(
                campaign,
                data.get("name"),
                description=data.get("description"),
                min_available=int(data.get("min_available", 1)),
                max_available=int(data.get("max_available", 1)),
            )
        except (TypeError, ValueError) as error:
            abort(400, description=str(error))

        current_app.logger.info("Created role %s in campaign %s", role.id, campaign.id)
        return {"id": role.id}, 201

    @app.route("/api/v1/campaign/<int:campaign_id>/questions/common")
    @login_required
    def get_common_questions(campaign_id):
        campaign = campaign_or_404(campaign_id)
        return jsonify([question.to_dict() for question in common_questions(campaign)])

    @app.route("/api/v1/campaign/<int:campaign_id>/role/<int:role_id>/questions")
    @login_required
    def get_role_questions(campaign_id, role_id):
        campaign = campaign_or_404(campaign_id)
        if not Role.query.filter_by(id=role_id, campaign_id=campaign.id).first():
            abort(404, description="Role not found")
        return jsonify(
            [question.to_dict() for question in role_questions(campaign, role_id)]
        )

    @app.route("/api/v1/campaign/<int:campaign_id>/question", methods=["POST"])
    @login_required
    def create_campaign_question(campaign_id):
        campaign = admin_campaign_or_403(campaign_id)
        data = request.get_json(silent=True) or {}
        options = (data.get("data") or {}).get("options") or []

        try:
            question = create_question(
                campaign,
                data.get("question_type"),
                data.get("title"),
                description=data.get("description"),
                required=data.get("required", False),
                role_id=data.get("role_id"),
                options=options,
            )
        except ValueError as error:
            abort(400, description=str(error))

        current_app.logger.info(
            "Created %s question %s in campaign %s",
            question.question_type,
            question.id,
            campaign.id,
        )
        return {"id": question.id}, 201

    @app.route("/api/v1/campaign/<int:campaign_id>/application", methods=["POST"])
    @login_required
    def create_or_get_application(campaign_id):
        campaign = campaign_or_404(campaign_id)
        if not campaign.is_open():
            abort(400, description="Campaign closed")

        application, created = get_or_create_application(campaign, current_user)
        if created:
            current_app.logger.info(
                "User %s started application %s for campaign %s",
                current_user.id,
                application.id,
                campaign.id,
            )
        return {"application_id": application.id}

    @app.route("/api/v1/campaign/<int:campaign_id>/applications")
    @login_required
    def get_campaign_applications(campaign_id):
        campaign = admin_campaign_or_403(campaign_id)
        applications = (
            Application.query.filter_by(campaign_id=campaign.id)
            .order_by(Application.id)
            .all()
        )

        rows = []
        for application in applications:
            rows.append(
                {
                    **application.to_dict(),
                    "user": application.user.to_dict(),
                    "applied_roles": [
                        {
                            "campaign_role_id": applied.campaign_role_id,
                            "role_name": applied.role.name,
                            "preference": applied.preference,
                        }
                        for applied in application.roles
                    ],
                }
            )
        return jsonify(rows)
