"""Applicant-side application state and answer reconciliation.

``ApplicationSession`` keeps the in-memory answers of one applicant in step
with the persisted Answer rows of their application. Role questions are
fetched lazily the first time a role is selected. All network work happens on
one event loop; responses that arrive after the selection they were issued for
has changed are discarded instead of being merged.
"""
import asyncio
import logging

from chaos.answer_data import RANKING, AnswerData
from chaos.client.api import (
    ANSWER_FIELDS,
    APPLICATION_ROLE_FIELDS,
    QUESTION_FIELDS,
    ROLE_FIELDS,
    check_rows,
)
from chaos.client.errors import ApiError, MalformedResponseError
from chaos.client.formatting import question_options

logger = logging.getLogger(__name__)

PENDING = "pending"
COMMITTED = "committed"
FAILED = "failed"


class ApplicationState:
    def __init__(self):
        self.campaign = None
        self.roles = []
        self.application_id = None
        # preference order is selection order
        self.selected_role_ids = []
        self.common_questions = []
        # a missing key means the role's questions have not been fetched yet
        self.questions_by_role = {}
        self.common_answers = {}
        self.role_answers = {}
        self.answers = {}
        self.statuses = {}

    def role(self, role_id):
        return next((role for role in self.roles if role["id"] == role_id), None)


class ApplicationSession:
    def __init__(self, api, campaign_id, notify=None):
        self.api = api
        self.campaign_id = campaign_id
        self.state = ApplicationState()
        self._notify = notify
        self._listeners = []
        self._selection_generation = {}
        self._question_locks = {}
        self._write_sequence = {}
        self._roles_lock = asyncio.Lock()
        self._pushed_roles = None

    def subscribe(self, listener):
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self):
        for listener in list(self._listeners):
            try:
                listener(self.state)
            except Exception:
                logger.exception("State listener %r failed", listener)

    def _report(self, message, error):
        logger.warning("%s: %s", message, error)
        if self._notify is not None:
            self._notify(f"{message}: {error}", "error")

    def _require_application(self):
        if self.state.application_id is None:
            raise RuntimeError("load() must complete before the application is edited")
        return self.state.application_id

    async def load(self):
        state = self.state
        campaign, roles, common_questions = await asyncio.gather(
            self.api.get_campaign(self.campaign_id),
            self.api.get_campaign_roles(self.campaign_id),
            self.api.get_common_questions(self.campaign_id),
        )
        check_rows(roles, ROLE_FIELDS, "campaign roles")
        check_rows(common_questions, QUESTION_FIELDS, "common questions")
        state.campaign, state.roles, state.common_questions = campaign, roles, common_questions

        created = await self.api.create_or_get_application(self.campaign_id)
        state.application_id = created["application_id"]

        common_answers = await self.api.get_common_application_answers(state.application_id)
        for row in check_rows(common_answers, ANSWER_FIELDS, "common answers"):
            self._remember(state.common_answers, row)

        applied = await self.api.get_application_roles(state.application_id)
        check_rows(applied, APPLICATION_ROLE_FIELDS, "application roles")
        applied = sorted(applied, key=lambda row: row["preference"])
        state.selected_role_ids = [row["campaign_role_id"] for row in applied]
        self._pushed_roles = list(state.selected_role_ids)
        self._changed()

        await asyncio.gather(
            *(
                self._fetch_role(role_id, self._next_generation(role_id))
                for role_id in state.selected_role_ids
            )
        )
        logger.info(
            "Loaded application %s for campaign %s with roles %s",
            state.application_id,
            self.campaign_id,
            state.selected_role_ids,
        )
        return state

    def _remember(self, partition, row):
        question_id = row["question_id"]
        partition[question_id] = row
        self.state.answers[question_id] = row["answer_data"]
        self.state.statuses[question_id] = COMMITTED

    def _next_generation(self, role_id):
        generation = self._selection_generation.get(role_id, 0) + 1
        self._selection_generation[role_id] = generation
        return generation

    def _is_current(self, role_id, generation):
        return (
            role_id in self.state.selected_role_ids
            and self._selection_generation.get(role_id) == generation
        )

    async def toggle_role(self, role_id):
        self._require_application()
        state = self.state
        generation = self._next_generation(role_id)

        if role_id in state.selected_role_ids:
            state.selected_role_ids.remove(role_id)
            selected = False
        else:
            state.selected_role_ids.append(role_id)
            selected = True
        self._changed()

        work = [self._push_roles()]
        if selected and role_id not in state.questions_by_role:
            work.append(self._fetch_role(role_id, generation))
        await asyncio.gather(*work)
        return selected

    async def _fetch_role(self, role_id, generation):
        application_id = self.state.application_id
        try:
            questions, answers = await asyncio.gather(
                self.api.get_role_questions(self.campaign_id, role_id),
                self.api.get_application_answers(application_id, role_id),
            )
            check_rows(questions, QUESTION_FIELDS, f"questions for role {role_id}")
            check_rows(answers, ANSWER_FIELDS, f"answers for role {role_id}")
        except ApiError as error:
            self._report(f"Could not load questions for role {role_id}", error)
            return

        if not self._is_current(role_id, generation):
            logger.debug("Discarding stale questions for role %s", role_id)
            return

        self.state.questions_by_role[role_id] = questions
        partition = self.state.role_answers.setdefault(role_id, {})
        for row in answers:
            if row["question_id"] not in partition:
                self._remember(partition, row)
        self._changed()

    async def _push_roles(self):
        application_id = self.state.application_id
        async with self._roles_lock:
            selection = list(self.state.selected_role_ids)
            if selection == self._pushed_roles:
                return
            payload = {
                "roles": [
                    {
                        "application_id": application_id,
                        "campaign_role_id": role_id,
                        "preference": preference,
                    }
                    for preference, role_id in enumerate(selection, start=1)
                ]
            }
            try:
                await self.api.update_application_roles(application_id, payload)
            except ApiError as error:
                self._report("Could not save role selection", error)
                return
            self._pushed_roles = selection

    def question(self, question_id):
        for question in self.state.common_questions:
            if question["id"] == question_id:
                return question
        for questions in self.state.questions_by_role.values():
            for question in questions:
                if question["id"] == question_id:
                    return question
        return None

    def _find_answer(self, question_id):
        if question_id in self.state.common_answers:
            return self.state.common_answers
        for partition in self.state.role_answers.values():
            if question_id in partition:
                return partition
        return None

    def _partition_for(self, question):
        if question.get("role_id") is None:
            return self.state.common_answers
        return self.state.role_answers.setdefault(question["role_id"], {})

    async def submit_answer(self, question_id, value, question_type):
        application_id = self._require_application()
        question = self.question(question_id)
        if question is None:
            raise KeyError(f"Question {question_id} is not loaded")
        if question["question_type"] != question_type:
            raise ValueError(
                f"Question {question_id} is a {question['question_type']} question, "
                f"not {question_type}"
            )

        answer = AnswerData.parse(question_type, value)
        option_count = len(question_options(question)) if question_type == RANKING else None
        delete = answer.is_empty(option_count)

        state = self.state
        if delete:
            state.answers.pop(question_id, None)
        else:
            state.answers[question_id] = answer.to_json()
        sequence = self._write_sequence.get(question_id, 0) + 1
        self._write_sequence[question_id] = sequence
        state.statuses[question_id] = PENDING
        self._changed()

        lock = self._question_locks.setdefault(question_id, asyncio.Lock())
        async with lock:
            try:
                if delete:
                    await self._delete_answer(question_id)
                else:
                    await self._save_answer(application_id, question, answer)
                status = COMMITTED
            except ApiError as error:
                self._report(f"Could not save answer to question {question_id}", error)
                status = FAILED

        if self._write_sequence[question_id] == sequence:
            if delete and status == COMMITTED:
                state.statuses.pop(question_id, None)
            else:
                state.statuses[question_id] = status
        self._changed()
        return status

    async def _delete_answer(self, question_id):
        partition = self._find_answer(question_id)
        if partition is None:
            return
        await self.api.delete_answer(partition[question_id]["id"])
        partition.pop(question_id, None)

    async def _save_answer(self, application_id, question, answer):
        question_id = question["id"]
        partition = self._find_answer(question_id)
        if partition is not None:
            row = partition[question_id]
            await self.api.update_answer(
                row["id"], question_id, answer.answer_type, answer.to_json()
            )
            row["answer_type"] = answer.answer_type
            row["answer_data"] = answer.to_json()
            return

        created = await self.api.create_answer(
            application_id, question_id, answer.answer_type, answer.to_json()
        )
        if "id" not in created:
            raise MalformedResponseError("Answer create response has no id")
        row = {
            "id": created["id"],
            "application_id": application_id,
            "question_id": question_id,
            "answer_type": answer.answer_type,
            "answer_data": answer.to_json(),
        }
        if "question_id" in created:
            row.update(created)
        self._partition_for(question)[question_id] = row

    async def submit(self):
        application_id = self._require_application()
        try:
            await self.api.submit_application(application_id)
        except ApiError as error:
            self._report("Could not submit application", error)
            return False
        logger.info("Submitted application %s", application_id)
        return True

    def active_tabs(self):
        tabs = [
            {
                "key": "general",
                "title": "General",
                "role_id": None,
                "questions": self.state.common_questions,
            }
        ]
        for role_id in self.state.selected_role_ids:
            if role_id not in self.state.questions_by_role:
                continue
            role = self.state.role(role_id)
            tabs.append(
                {
                    "key": f"role-{role_id}",
                    "title": role["name"] if role else f"Role {role_id}",
                    "role_id": role_id,
                    "questions": self.state.questions_by_role[role_id],
                }
            )
        return tabs

    def failed_questions(self):
        return [
            question_id
            for question_id, status in self.state.statuses.items()
            if status == FAILED
        ]
