"""Test doubles shared by the client, endpoint, checkout, review and app tests."""

import json


class FakeResponse:
    def __init__(self, status_code, body=None, text=None):
        self.status_code = status_code
        if text is not None:
            self.text = text
        else:
            self.text = "" if body is None else json.dumps(body)
        self.content = self.text.encode()

    def json(self):
        return json.loads(self.text)


class FakeHttp:
    """Stands in for requests.Session; records every call."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp


class FakeApi:
    """
    Replaces ApiClient. Each call pops the next canned reply for its method;
    exceptions are raised instead of returned.
    """

    def __init__(self, **replies):
        self.replies = {m: list(replies.get(m, [])) for m in ("get", "post", "put", "delete")}
        self.calls = []

    async def _call(self, method, path, **kwargs):
        self.calls.append((method, path, kwargs))
        queue = self.replies[method]
        reply = queue.pop(0) if queue else None
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def get(self, path, **kwargs):
        return await self._call("get", path, **kwargs)

    async def post(self, path, **kwargs):
        return await self._call("post", path, **kwargs)

    async def put(self, path, **kwargs):
        return await self._call("put", path, **kwargs)

    async def delete(self, path, **kwargs):
        return await self._call("delete", path, **kwargs)
