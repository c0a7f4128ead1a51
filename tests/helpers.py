import json
from unittest.mock import MagicMock


def make_response(status=200, payload=None):
    res = MagicMock()
    res.ok = 200 <= status < 300
    res.status_code = status
    res.text = json.dumps(payload) if payload is not None else ""
    res.json.return_value = payload
    return res


class FakeApi:
    """Stands in for requests.request, answering by (method, url)."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, url, *responses):
        self.routes.setdefault((method, url), []).extend(responses)

    def __call__(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        queue = self.routes.get((method, url))
        if not queue:
            raise AssertionError(f"Unexpected request {method} {url}")
        # The last response repeats
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def called(self, method, url):
        return [c for c in self.calls if c[0] == method and c[1] == url]
