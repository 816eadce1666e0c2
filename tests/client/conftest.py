import asyncio
import copy

import httpx
import pytest

from chaos.client.errors import FetchError, TransportError

CAMPAIGN = {"id": 1, "name": "2026 Subcommittee Recruitment"}
ROLES = [
    {"id": 5, "campaign_id": 1, "name": "Events"},
    {"id": 6, "campaign_id": 1, "name": "Marketing"},
]
COMMON_QUESTIONS = [
    {
        "id": 10,
        "role_id": None,
        "question_type": "ShortAnswer",
        "title": "Why do you want to join?",
        "required": True,
    }
]
ROLE_QUESTIONS = {
    5: [
        {
            "id": 20,
            "role_id": 5,
            "question_type": "DropDown",
            "title": "Have you run an event before?",
            "required": True,
            "data": {
                "options": [
                    {"id": 1, "text": "Yes", "display_order": 0},
                    {"id": 2, "text": "No", "display_order": 1},
                ]
            },
        }
    ],
    6: [
        {
            "id": 30,
            "role_id": 6,
            "question_type": "Ranking",
            "title": "Rank these platforms",
            "required": False,
            "data": {
                "options": [
                    {"id": 3, "text": "Instagram", "display_order": 0},
                    {"id": 4, "text": "TikTok", "display_order": 1},
                    {"id": 5, "text": "LinkedIn", "display_order": 2},
                ]
            },
        }
    ],
}


def http_failure(status, message):
    return FetchError(httpx.Response(status, json={"ok": False, "error": message}))


class FakeChaosApi:
    """In-memory stand-in for ChaosApi.

    ``hold(method)`` queues a gate the next call of ``method`` waits on, and
    ``fail(method, error)`` makes every later call of ``method`` raise, and
    ``reply(method, value)`` makes it return ``value`` verbatim.
    """

    def __init__(self, application_id=42):
        self.application_id = application_id
        self.role_questions = copy.deepcopy(ROLE_QUESTIONS)
        self.answers = {}
        self.application_roles = []
        self.calls = []
        self._gates = {}
        self._failures = {}
        self._replies = {}
        self._next_answer_id = 100

    def hold(self, method):
        gate = asyncio.Event()
        self._gates.setdefault(method, []).append(gate)
        return gate

    def fail(self, method, error=None):
        self._failures[method] = error or TransportError("connection refused")

    def recover(self, method):
        self._failures.pop(method, None)
        self._replies.pop(method, None)

    def reply(self, method, value):
        self._replies[method] = value

    def _reply(self, method, default):
        if method in self._replies:
            return copy.deepcopy(self._replies[method])
        return default

    def called(self, method):
        return [call[1:] for call in self.calls if call[0] == method]

    async def _enter(self, method, *args):
        self.calls.append((method, *args))
        gates = self._gates.get(method)
        if gates:
            await gates.pop(0).wait()
        else:
            await asyncio.sleep(0)
        if method in self._failures:
            raise self._failures[method]

    def _role_of(self, question_id):
        for role_id, questions in self.role_questions.items():
            if any(question["id"] == question_id for question in questions):
                return role_id
        return None

    def seed_answer(self, question_id, answer_type, answer_data):
        answer_id = self._next_answer_id
        self._next_answer_id += 1
        self.answers[answer_id] = {
            "id": answer_id,
            "application_id": self.application_id,
            "question_id": question_id,
            "answer_type": answer_type,
            "answer_data": answer_data,
        }
        return answer_id

    def answer_for(self, question_id):
        rows = [row for row in self.answers.values() if row["question_id"] == question_id]
        assert len(rows) <= 1, f"question {question_id} has {len(rows)} answers"
        return rows[0] if rows else None

    async def get_campaign(self, campaign_id):
        await self._enter("get_campaign", campaign_id)
        return dict(CAMPAIGN)

    async def get_campaign_roles(self, campaign_id):
        await self._enter("get_campaign_roles", campaign_id)
        return copy.deepcopy(ROLES)

    async def get_common_questions(self, campaign_id):
        await self._enter("get_common_questions", campaign_id)
        return self._reply("get_common_questions", copy.deepcopy(COMMON_QUESTIONS))

    async def get_role_questions(self, campaign_id, role_id):
        # snapshot before any gate so a delayed response carries the old batch
        questions = copy.deepcopy(self.role_questions.get(role_id, []))
        await self._enter("get_role_questions", campaign_id, role_id)
        return self._reply("get_role_questions", questions)

    async def create_or_get_application(self, campaign_id):
        await self._enter("create_or_get_application", campaign_id)
        return {"application_id": self.application_id}

    async def get_common_application_answers(self, application_id):
        await self._enter("get_common_application_answers", application_id)
        rows = [
            dict(row)
            for row in self.answers.values()
            if self._role_of(row["question_id"]) is None
        ]
        return self._reply("get_common_application_answers", rows)

    async def get_application_answers(self, application_id, role_id):
        rows = [
            dict(row)
            for row in self.answers.values()
            if self._role_of(row["question_id"]) == role_id
        ]
        await self._enter("get_application_answers", application_id, role_id)
        return self._reply("get_application_answers", rows)

    async def get_application_roles(self, application_id):
        await self._enter("get_application_roles", application_id)
        return copy.deepcopy(self.application_roles)

    async def update_application_roles(self, application_id, roles):
        await self._enter("update_application_roles", application_id, roles)
        self.application_roles = copy.deepcopy(roles["roles"])
        return copy.deepcopy(self.application_roles)

    async def create_answer(self, application_id, question_id, answer_type, data):
        await self._enter("create_answer", question_id, answer_type, data)
        if self.answer_for(question_id) is not None:
            raise http_failure(409, f"Question {question_id} is already answered")
        return {"id": self.seed_answer(question_id, answer_type, data)}

    async def update_answer(self, answer_id, question_id, answer_type, data):
        await self._enter("update_answer", answer_id, question_id, answer_type, data)
        if answer_id not in self.answers:
            raise http_failure(404, "Answer not found")
        self.answers[answer_id]["answer_data"] = data

    async def delete_answer(self, answer_id):
        await self._enter("delete_answer", answer_id)
        if self.answers.pop(answer_id, None) is None:
            raise http_failure(404, "Answer not found")

    async def submit_application(self, application_id):
        await self._enter("submit_application", application_id)


@pytest.fixture()
def fake_api():
    return FakeChaosApi()
