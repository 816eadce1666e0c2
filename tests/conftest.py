from datetime import timedelta
from pathlib import Path
import sys
import os

import httpx
import pytest
from flask import g

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from chaos import create_app
from chaos.client import ChaosApi
from chaos.extensions import db
from chaos.models.campaign import utcnow
from chaos.models import (
    Campaign,
    Organisation,
    Question,
    QuestionOption,
    Role,
    User,
)


@pytest.fixture()
def app(tmp_path: Path):
    db_file = tmp_path / "test.sqlite3"
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_file}",
        }
    )

    @app.before_request
    def forget_cached_user():
        # requests reuse the fixture app context, so g outlives a single request
        g.pop("_login_user", None)

    with app.app_context():
        driver = db.engine.url.drivername
        if driver != "sqlite":
            raise RuntimeError(
                f"Test database must be SQLite, got '{driver}'. Refusing to run destructive test setup."
            )
        db.drop_all()
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def db_session(app):
    with app.app_context():
        yield db.session


@pytest.fixture()
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def applicant(db_session):
    user = User(
        email="applicant@example.com",
        display_name="Ada Applicant",
        zid="z5000001",
        degree_name="Computer Science",
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture()
def reviewer(db_session):
    user = User(email="reviewer@example.com", display_name="Rex Reviewer")
    db_session.add(user)
    db_session.commit()
    return user


def login(client, user):
    with client.session_transaction() as session:
        session["_user_id"] = str(user.id)
        session["_fresh"] = True
    return client


@pytest.fixture()
def auth_client(client, applicant):
    return login(client, applicant)


@pytest.fixture()
def reviewer_client(app, reviewer):
    return login(app.test_client(), reviewer)


@pytest.fixture()
def campaign_setup(db_session, reviewer):
    """Open campaign with one common ShortAnswer question (10) and a role (5)
    owning a DropDown question (20) with options Yes (1) and No (2)."""
    organisation = Organisation(name="DevSoc", admin_id=reviewer.id)
    db_session.add(organisation)
    db_session.flush()

    now = utcnow()
    campaign = Campaign(
        id=1,
        organisation_id=organisation.id,
        name="2026 Subcommittee Recruitment",
        description="Join us",
        starts_at=now - timedelta(days=1),
        ends_at=now + timedelta(days=14),
    )
    db_session.add(campaign)
    db_session.flush()

    role = Role(
        id=5,
        campaign_id=campaign.id,
        name="Events",
        description="Workshops and hackathons",
        min_available=1,
        max_available=3,
    )
    other_role = Role(id=6, campaign_id=campaign.id, name="Marketing")
    db_session.add_all([role, other_role])
    db_session.flush()

    common = Question(
        id=10,
        campaign_id=campaign.id,
        question_type="ShortAnswer",
        title="Why do you want to join?",
        required=True,
    )
    dropdown = Question(
        id=20,
        campaign_id=campaign.id,
        role_id=role.id,
        question_type="DropDown",
        title="Have you run an event before?",
        required=True,
    )
    ranking = Question(
        id=30,
        campaign_id=campaign.id,
        role_id=other_role.id,
        question_type="Ranking",
        title="Rank these platforms",
    )
    db_session.add_all([common, dropdown, ranking])
    db_session.flush()

    db_session.add_all(
        [
            QuestionOption(id=1, question_id=dropdown.id, text="Yes", display_order=0),
            QuestionOption(id=2, question_id=dropdown.id, text="No", display_order=1),
            QuestionOption(id=3, question_id=ranking.id, text="Instagram", display_order=0),
            QuestionOption(id=4, question_id=ranking.id, text="TikTok", display_order=1),
            QuestionOption(id=5, question_id=ranking.id, text="LinkedIn", display_order=2),
        ]
    )
    db_session.commit()
    return campaign


def flask_transport(test_client):
    """httpx transport that hands every request to a Flask test client."""

    def handler(request):
        response = test_client.open(
            request.url.raw_path.decode("ascii"),
            method=request.method,
            data=request.content,
            content_type=request.headers.get("content-type", "application/json"),
        )
        return httpx.Response(
            response.status_code,
            headers={"Content-Type": response.content_type or "application/json"},
            content=response.get_data(),
        )

    return httpx.MockTransport(handler)


@pytest.fixture()
def api_for():
    """Build a ChaosApi that talks to the app through the given test client."""
    def make(test_client):
        return ChaosApi("http://testserver", transport=flask_transport(test_client))

    return make
