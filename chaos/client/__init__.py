from chaos.client.api import ChaosApi
from chaos.client.errors import ApiError, FetchError, MalformedResponseError, TransportError
from chaos.client.formatting import NO_ANSWER_TEXT, format_answer
from chaos.client.review import StagingTable, build_review, load_ratings
from chaos.client.session import ApplicationSession, ApplicationState
from chaos.client.widgets import render_question, session_widgets

__all__ = [
    "ChaosApi",
    "ApiError",
    "FetchError",
    "MalformedResponseError",
    "TransportError",
    "NO_ANSWER_TEXT",
    "format_answer",
    "StagingTable",
    "build_review",
    "load_ratings",
    "ApplicationSession",
    "ApplicationState",
    "render_question",
    "session_widgets",
]
