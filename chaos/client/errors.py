class ApiError(Exception):
    pass


class TransportError(ApiError):
    """The request never produced an HTTP response."""


class FetchError(ApiError):
    def __init__(self, response):
        self.status = response.status_code
        self.status_text = response.reason_phrase
        self.response = response
        super().__init__(f"{self.status} {self.status_text}: {self.detail}")

    @property
    def detail(self):
        try:
            body = self.response.json()
        except ValueError:
            return self.response.text
        if isinstance(body, dict) and "error" in body:
            return body["error"]
        return body


class MalformedResponseError(ApiError):
    pass
