import logging

import httpx

from chaos.client.errors import FetchError, MalformedResponseError, TransportError

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

ROLE_FIELDS = ("id", "name")
QUESTION_FIELDS = ("id", "question_type")
ANSWER_FIELDS = ("id", "question_id", "answer_data")
APPLICATION_ROLE_FIELDS = ("campaign_role_id", "preference")
RATING_FIELDS = ("id", "rating")


def check_rows(rows, fields, what):
    """Raise ``MalformedResponseError`` unless ``rows`` is a list of dicts carrying ``fields``."""
    if not isinstance(rows, list):
        raise MalformedResponseError(f"{what}: expected a list, got {type(rows).__name__}")
    for row in rows:
        if not isinstance(row, dict):
            raise MalformedResponseError(f"{what}: row {row!r} is not an object")
        missing = [field for field in fields if field not in row]
        if missing:
            raise MalformedResponseError(f"{what}: row is missing {', '.join(missing)}")
    return rows


class ChaosApi:
    """Async client for the Chaos REST API.

    Every coroutine returns decoded JSON. Failures surface as
    ``TransportError`` (no response), ``FetchError`` (non-2xx) or
    ``MalformedResponseError`` (body is not the expected shape).
    """

    def __init__(self, base_url, timeout=10.0, transport=None, cookies=None):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + API_PREFIX,
            timeout=httpx.Timeout(timeout),
            transport=transport,
            cookies=cookies,
            headers={"Content-Type": "application/json"},
        )

    @classmethod
    def from_config(cls, config, **kwargs):
        # accepts the Config class or a Flask app.config mapping
        if isinstance(config, dict):
            base_url, timeout = config["CHAOS_API_BASE_URL"], config["CHAOS_API_TIMEOUT"]
        else:
            base_url, timeout = config.CHAOS_API_BASE_URL, config.CHAOS_API_TIMEOUT
        return cls(base_url, timeout=timeout, **kwargs)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def _request(self, method, path, body=None, params=None):
        logger.debug("%s %s", method, path)
        try:
            response = await self._client.request(
                method, path, json=body, params=params
            )
        except httpx.HTTPError as error:
            logger.warning("%s %s failed: %s", method, path, error)
            raise TransportError(f"{method} {path}: {error}") from error

        if response.is_error:
            raise FetchError(response)
        return response

    async def _json(self, method, path, body=None, params=None, expect=None, fields=None):
        response = await self._request(method, path, body=body, params=params)
        try:
            data = response.json()
        except ValueError as error:
            raise MalformedResponseError(
                f"{method} {path} returned invalid JSON"
            ) from error

        if expect is not None and not isinstance(data, expect):
            raise MalformedResponseError(
                f"{method} {path} returned {type(data).__name__}, "
                f"expected {expect.__name__}"
            )
        if fields is not None:
            check_rows(data, fields, f"{method} {path}")
        return data

    async def get_self_info(self):
        return await self._json("GET", "/user", expect=dict)

    async def get_campaign(self, campaign_id):
        return await self._json("GET", f"/campaign/{campaign_id}", expect=dict)

    async def get_campaign_roles(self, campaign_id):
        return await self._json("GET", f"/campaign/{campaign_id}/roles", fields=ROLE_FIELDS)

    async def get_common_questions(self, campaign_id):
        return await self._json(
            "GET", f"/campaign/{campaign_id}/questions/common", fields=QUESTION_FIELDS
        )

    async def get_role_questions(self, campaign_id, role_id):
        return await self._json(
            "GET", f"/campaign/{campaign_id}/role/{role_id}/questions", fields=QUESTION_FIELDS
        )

    async def create_or_get_application(self, campaign_id):
        data = await self._json(
            "POST", f"/campaign/{campaign_id}/application", body={}, expect=dict
        )
        if "application_id" not in data:
            raise MalformedResponseError("Application response has no application_id")
        return data

    async def get_campaign_applications(self, campaign_id):
        return await self._json(
            "GET", f"/campaign/{campaign_id}/applications", fields=("id",)
        )

    async def get_common_application_answers(self, application_id):
        return await self._json(
            "GET", f"/application/{application_id}/answers/common", fields=ANSWER_FIELDS
        )

    async def get_application_answers(self, application_id, role_id):
        return await self._json(
            "GET", f"/application/{application_id}/answers/role/{role_id}", fields=ANSWER_FIELDS
        )

    async def create_answer(self, application_id, question_id, answer_type, data):
        return await self._json(
            "POST",
            f"/application/{application_id}/answer",
            body={
                "question_id": question_id,
                "answer_type": answer_type,
                "answer_data": data,
            },
            expect=dict,
        )

    async def update_answer(self, answer_id, question_id, answer_type, data):
        await self._request(
            "PATCH",
            f"/answer/{answer_id}",
            body={
                "question_id": question_id,
                "answer_type": answer_type,
                "answer_data": data,
            },
        )

    async def delete_answer(self, answer_id):
        await self._request("DELETE", f"/answer/{answer_id}")

    async def get_application_roles(self, application_id):
        return await self._json(
            "GET", f"/application/{application_id}/roles", fields=APPLICATION_ROLE_FIELDS
        )

    async def update_application_roles(self, application_id, roles):
        return await self._json(
            "PATCH",
            f"/application/{application_id}/roles",
            body=roles,
            fields=APPLICATION_ROLE_FIELDS,
        )

    async def submit_application(self, application_id):
        await self._request("POST", f"/application/{application_id}/submit", body={})

    async def set_application_status(self, application_id, status, private=False):
        params = {"private": "true"} if private else None
        return await self._json(
            "PATCH",
            f"/application/{application_id}/status",
            body={"status": status},
            params=params,
            expect=dict,
        )

    async def get_application_ratings(self, application_id):
        data = await self._json(
            "GET", f"/application/{application_id}/ratings", expect=dict
        )
        return check_rows(
            data.get("ratings"), RATING_FIELDS, f"ratings for application {application_id}"
        )

    async def create_rating(self, application_id, rating, comment=None):
        data = await self._json(
            "POST",
            f"/application/{application_id}/rating",
            body={"rating": rating, "comment": comment},
            expect=dict,
        )
        if "id" not in data:
            raise MalformedResponseError("Rating create response has no id")
        return data

    async def get_rating(self, rating_id):
        return await self._json("GET", f"/rating/{rating_id}", expect=dict)

    async def update_rating(self, rating_id, rating, comment=None):
        await self._request(
            "PUT", f"/rating/{rating_id}", body={"rating": rating, "comment": comment}
        )

    async def delete_rating(self, rating_id):
        await self._request("DELETE", f"/rating/{rating_id}")
