from chaos.models.answer import Answer
from chaos.models.application import Application, ApplicationRole
from chaos.models.campaign import Campaign
from chaos.models.organisation import Organisation
from chaos.models.question import Question, QuestionOption
from chaos.models.rating import Rating
from chaos.models.role import Role
from chaos.models.user import User

__all__ = [
    "User",
    "Organisation",
    "Campaign",
    "Role",
    "Question",
    "QuestionOption",
    "Application",
    "ApplicationRole",
    "Answer",
    "Rating",
]
