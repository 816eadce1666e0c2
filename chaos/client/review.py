import asyncio
import logging

from chaos.client.errors import ApiError
from chaos.client.formatting import NO_ANSWER_TEXT, format_answer

logger = logging.getLogger(__name__)

STATUS_OPTIONS = [
    ("all", "All Statuses"),
    ("pending", "Pending"),
    ("successful", "Successful"),
    ("rejected", "Rejected"),
]


def build_review(session):
    """Summary shown on the applicant's review tab."""
    state = session.state
    sections = []
    for tab in session.active_tabs():
        rows = []
        for question in tab["questions"]:
            text = format_answer(question, state.answers.get(question["id"]))
            rows.append(
                {
                    "question_id": question["id"],
                    "title": question["title"],
                    "answer": text,
                    "missing": bool(question.get("required")) and text == NO_ANSWER_TEXT,
                    "status": state.statuses.get(question["id"]),
                }
            )
        sections.append({"title": tab["title"], "role_id": tab["role_id"], "rows": rows})

    selected_roles = []
    for preference, role_id in enumerate(state.selected_role_ids, start=1):
        role = state.role(role_id)
        selected_roles.append(
            {
                "role_id": role_id,
                "name": role["name"] if role else f"Role {role_id}",
                "preference": preference,
            }
        )

    return {
        "campaign": (state.campaign or {}).get("name"),
        "roles": selected_roles,
        "sections": sections,
        "missing_required": [
            row["title"]
            for section in sections
            for row in section["rows"]
            if row["missing"]
        ],
        "failed": session.failed_questions(),
    }


class StagingTable:
    """Reviewer table of applicants for a campaign, filterable by status and role."""

    def __init__(self, applications):
        self.rows = [self._row(application) for application in applications]
        self.status_filter = "all"
        self.role_filter = None
        self.selected = set()

    @staticmethod
    def _row(application):
        user = application.get("user") or {}
        roles = sorted(
            application.get("applied_roles") or [], key=lambda role: role["preference"]
        )
        return {
            "id": application["id"],
            "name": user.get("display_name", ""),
            "zid": user.get("zid") or "",
            "status": (application.get("status") or "Pending").lower(),
            "roles": [role["role_name"] for role in roles],
            "role_ids": [role["campaign_role_id"] for role in roles],
            "ratings": [],
            "average_rating": None,
        }

    def set_ratings(self, application_id, ratings):
        row = next((row for row in self.rows if row["id"] == application_id), None)
        if row is None:
            raise KeyError(f"Application {application_id} is not in the table")
        row["ratings"] = list(ratings)
        marks = [rating["rating"] for rating in row["ratings"]]
        row["average_rating"] = round(sum(marks) / len(marks), 2) if marks else None

    def ranked(self):
        """Visible rows, best average rating first; unrated rows go last."""
        rated = [row for row in self.visible if row["average_rating"] is not None]
        unrated = [row for row in self.visible if row["average_rating"] is None]
        return sorted(rated, key=lambda row: -row["average_rating"]) + unrated

    def set_status_filter(self, status):
        if status not in dict(STATUS_OPTIONS):
            raise ValueError(f"Unknown status filter: {status!r}")
        self.status_filter = status

    def set_role_filter(self, role_id):
        self.role_filter = role_id

    @property
    def visible(self):
        rows = self.rows
        if self.status_filter != "all":
            rows = [row for row in rows if row["status"] == self.status_filter]
        if self.role_filter is not None:
            rows = [row for row in rows if self.role_filter in row["role_ids"]]
        return rows

    def toggle(self, application_id):
        if application_id in self.selected:
            self.selected.discard(application_id)
        else:
            self.selected.add(application_id)

    def toggle_all(self):
        visible_ids = {row["id"] for row in self.visible}
        if visible_ids and self.selected == visible_ids:
            self.selected = set()
        else:
            self.selected = visible_ids

    @property
    def select_all_label(self):
        visible = self.visible
        if visible and len(self.selected) == len(visible):
            return "Deselect All"
        return "Select All"

    @property
    def empty_message(self):
        if self.visible:
            return None
        return "No applicants found for the selected status."


async def load_ratings(api, table):
    """Fetch every row's ratings into ``table``; returns ids that failed to load."""

    async def fetch(application_id):
        try:
            ratings = await api.get_application_ratings(application_id)
        except ApiError as error:
            logger.warning("Could not load ratings for application %s: %s", application_id, error)
            return application_id
        table.set_ratings(application_id, ratings)
        return None

    results = await asyncio.gather(*(fetch(row["id"]) for row in table.rows))
    return [application_id for application_id in results if application_id is not None]
